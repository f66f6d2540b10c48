"""Local directory destination"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from ..constants import DEFAULT_CHUNK_SIZE, DEFAULT_LOCAL_DEPLOY_DIR, DestinationType, Platform
from ..models.deploy import UploadResult
from .base import DestinationClient

logger = logging.getLogger(__name__)


class LocalClient(DestinationClient):
    """Copy artifacts into a directory, for archiving or manual sharing"""

    destination = DestinationType.LOCAL
    platform = Platform.ANDROID
    accepted_types = ("apk", "aab", "ipa")

    @property
    def output_dir(self) -> Path:
        return self.resolve_path(self.config.get('output_dir') or DEFAULT_LOCAL_DEPLOY_DIR)

    async def upload(self,
                     artifact_file: Union[str, Path],
                     release_notes: Optional[str] = None,
                     test_groups: Optional[List[str]] = None) -> UploadResult:
        problem = self.validate_file(artifact_file)
        if problem:
            return UploadResult(success=False, error=problem)

        source = Path(artifact_file)
        target = self.output_dir / source.name
        target.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp name so a partial copy is never mistaken for an artifact
        partial = target.with_name(target.name + ".part")
        total = 0
        try:
            async with aiofiles.open(source, 'rb') as src:
                async with aiofiles.open(partial, 'wb') as dst:
                    while True:
                        chunk = await src.read(DEFAULT_CHUNK_SIZE)
                        if not chunk:
                            break
                        await dst.write(chunk)
                        total += len(chunk)
            os.replace(partial, target)
        finally:
            if partial.exists():
                logger.warning(f"Removing incomplete copy {partial}")
                partial.unlink()

        if release_notes:
            notes_file = target.with_name(target.stem + "-release-notes.txt")
            async with aiofiles.open(notes_file, 'w', encoding='utf-8') as f:
                await f.write(release_notes + "\n")

        logger.info(f"Copied {source.name} to {target} ({total} bytes)")
        return UploadResult(
            success=True,
            message=f"Copied to {target}",
            build_url=target.resolve().as_uri(),
        )
