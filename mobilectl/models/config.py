"""Configuration data models"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..constants import (
    ArtifactType,
    Platform,
    DEFAULT_ANDROID_ARTIFACT,
    DEFAULT_IOS_ARTIFACT,
    DEFAULT_LOCAL_DEPLOY_DIR,
)


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key, accepting snake_case and camelCase spellings"""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _section(data: Dict[str, Any], *keys: str) -> Optional[Dict[str, Any]]:
    value = _pick(data, *keys)
    return value if isinstance(value, dict) else None


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in value if item is not None]


def _prune(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None values and empty containers"""
    return {
        key: value for key, value in data.items()
        if value is not None and value != [] and value != {}
    }


@dataclass
class AppConfig:
    """Application identity"""

    name: Optional[str] = None
    identifier: Optional[str] = None
    organization: Optional[str] = None
    version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppConfig':
        """Create from dictionary"""
        return cls(
            name=_pick(data, 'name'),
            identifier=_pick(data, 'identifier', 'package', 'bundle_id', 'bundleId'),
            organization=_pick(data, 'organization'),
            version=_pick(data, 'version'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'name': self.name,
            'identifier': self.identifier,
            'organization': self.organization,
            'version': self.version,
        })


@dataclass
class OutputConfig:
    """Build output naming"""

    format: str = "apk"
    name: str = "app-release.apk"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_format: str,
                  default_name: str) -> 'OutputConfig':
        """Create from dictionary with platform defaults"""
        return cls(
            format=_pick(data, 'format', default=default_format),
            name=_pick(data, 'name', default=default_name),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {'format': self.format, 'name': self.name}


@dataclass
class AndroidBuildConfig:
    """Android build settings"""

    enabled: bool = True
    project_path: str = "."
    default_flavor: str = ""
    default_type: str = "release"
    flavors: List[str] = field(default_factory=list)
    output_type: str = "apk"
    firebase_output_type: str = "apk"
    gradle_properties: Dict[str, str] = field(default_factory=dict)

    # Signing
    key_store: str = ""
    key_alias: str = ""
    key_password: str = ""
    store_password: str = ""
    use_env_for_passwords: bool = True

    def gradle_task(self,
                    artifact_type: ArtifactType = ArtifactType.APK,
                    flavor: Optional[str] = None,
                    build_type: Optional[str] = None) -> str:
        """Gradle task for the requested artifact

        Computed on every call so later changes to flavor or type are honored.

        Args:
            artifact_type: APK (assemble) or AAB (bundle)
            flavor: Product flavor, defaults to ``default_flavor``
            build_type: Build type, defaults to ``default_type``

        Returns:
            Task name such as ``assembleFreeRelease``
        """
        flavor = self.default_flavor if flavor is None else flavor
        build_type = build_type or self.default_type or "release"
        prefix = "bundle" if artifact_type == ArtifactType.AAB else "assemble"
        return f"{prefix}{flavor[:1].upper()}{flavor[1:]}{build_type[:1].upper()}{build_type[1:]}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AndroidBuildConfig':
        """Create from dictionary"""
        keystore = _section(data, 'keystore') or {}
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            project_path=_pick(data, 'project_path', 'projectPath', default="."),
            default_flavor=_pick(data, 'default_flavor', 'defaultFlavor', default=""),
            default_type=_pick(data, 'default_type', 'defaultType', default="release"),
            flavors=_string_list(_pick(data, 'flavors')),
            output_type=str(_pick(data, 'output_type', 'outputType', default="apk")).lower(),
            firebase_output_type=str(
                _pick(data, 'firebase_output_type', 'firebaseOutputType', default="apk")
            ).lower(),
            gradle_properties={
                str(k): str(v)
                for k, v in (_pick(data, 'gradle_properties', 'gradleProperties') or {}).items()
            },
            key_store=_pick(data, 'key_store', 'keyStore', default=keystore.get('path', "")),
            key_alias=_pick(data, 'key_alias', 'keyAlias', default=keystore.get('alias', "")),
            key_password=_pick(data, 'key_password', 'keyPassword',
                               default=keystore.get('key_password', "")),
            store_password=_pick(data, 'store_password', 'storePassword',
                                 default=keystore.get('store_password', "")),
            use_env_for_passwords=bool(
                _pick(data, 'use_env_for_passwords', 'useEnvForPasswords', default=True)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'enabled': self.enabled,
            'project_path': self.project_path if self.project_path != "." else None,
            'default_flavor': self.default_flavor or None,
            'default_type': self.default_type,
            'flavors': list(self.flavors),
            'output_type': self.output_type,
            'firebase_output_type': self.firebase_output_type,
            'gradle_properties': dict(self.gradle_properties),
            'key_store': self.key_store or None,
            'key_alias': self.key_alias or None,
            'key_password': self.key_password or None,
            'store_password': self.store_password or None,
            'use_env_for_passwords': self.use_env_for_passwords,
        }
        return _prune(data)


@dataclass
class IosBuildConfig:
    """iOS build settings"""

    enabled: bool = False
    project_path: str = "."
    workspace: Optional[str] = None
    project: Optional[str] = None
    scheme: str = ""
    configuration: str = "Release"
    destination: str = "generic/platform=iOS"
    code_sign_identity: Optional[str] = None
    provisioning_profile: Optional[str] = None
    export_options_plist: Optional[str] = None
    output: OutputConfig = field(
        default_factory=lambda: OutputConfig(format="ipa", name="app-release.ipa")
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IosBuildConfig':
        """Create from dictionary"""
        return cls(
            enabled=bool(_pick(data, 'enabled', default=False)),
            project_path=_pick(data, 'project_path', 'projectPath', default="."),
            workspace=_pick(data, 'workspace'),
            project=_pick(data, 'project'),
            scheme=_pick(data, 'scheme', default=""),
            configuration=_pick(data, 'configuration', default="Release"),
            destination=_pick(data, 'destination', default="generic/platform=iOS"),
            code_sign_identity=_pick(data, 'code_sign_identity', 'codeSignIdentity'),
            provisioning_profile=_pick(data, 'provisioning_profile', 'provisioningProfile'),
            export_options_plist=_pick(data, 'export_options_plist', 'exportOptionsPlist'),
            output=OutputConfig.from_dict(_section(data, 'output') or {}, "ipa", "app-release.ipa"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'project_path': self.project_path if self.project_path != "." else None,
            'workspace': self.workspace,
            'project': self.project,
            'scheme': self.scheme or None,
            'configuration': self.configuration,
            'destination': self.destination,
            'code_sign_identity': self.code_sign_identity,
            'provisioning_profile': self.provisioning_profile,
            'export_options_plist': self.export_options_plist,
            'output': self.output.to_dict(),
        })


@dataclass
class BuildConfig:
    """Per-platform build settings"""

    android: AndroidBuildConfig = field(default_factory=AndroidBuildConfig)
    ios: IosBuildConfig = field(default_factory=IosBuildConfig)

    def is_enabled(self, platform: Platform) -> bool:
        """Check whether a platform may be targeted"""
        if platform == Platform.ANDROID:
            return self.android.enabled is True
        return self.ios.enabled is True

    def enabled_platforms(self) -> Set[Platform]:
        """Platforms with ``enabled`` set"""
        return {platform for platform in Platform if self.is_enabled(platform)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BuildConfig':
        """Create from dictionary"""
        return cls(
            android=AndroidBuildConfig.from_dict(_section(data, 'android') or {}),
            ios=IosBuildConfig.from_dict(_section(data, 'ios') or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {'android': self.android.to_dict(), 'ios': self.ios.to_dict()}


@dataclass
class VersionConfig:
    """Version management settings"""

    enabled: bool = True
    current: str = "1.0.0"
    auto_increment: bool = False
    bump_strategy: str = "patch"
    files_to_update: List[str] = field(default_factory=list)
    increment_version_code: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VersionConfig':
        """Create from dictionary"""
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            current=str(_pick(data, 'current', default="1.0.0")),
            auto_increment=bool(_pick(data, 'auto_increment', 'autoIncrement', default=False)),
            bump_strategy=str(_pick(data, 'bump_strategy', 'bumpStrategy', default="patch")),
            files_to_update=_string_list(_pick(data, 'files_to_update', 'filesToUpdate')),
            increment_version_code=bool(
                _pick(data, 'increment_version_code', 'incrementVersionCode', default=True)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'current': self.current,
            'auto_increment': self.auto_increment,
            'bump_strategy': self.bump_strategy,
            'files_to_update': list(self.files_to_update),
            'increment_version_code': self.increment_version_code,
        })


@dataclass(frozen=True)
class CommitType:
    """Changelog section for one conventional commit type"""

    type: str
    title: str
    emoji: str = ""

    @property
    def heading(self) -> str:
        return f"{self.emoji} {self.title}".strip()


def default_commit_types() -> List[CommitType]:
    """Built-in commit type taxonomy"""
    return [
        CommitType("feat", "Features", "✨"),
        CommitType("fix", "Bug Fixes", "🐛"),
        CommitType("docs", "Documentation", "📚"),
        CommitType("style", "Styles", "💎"),
        CommitType("refactor", "Code Refactoring", "♻️"),
        CommitType("perf", "Performance", "⚡"),
        CommitType("test", "Tests", "✅"),
        CommitType("chore", "Chores", "🔧"),
        CommitType("ci", "Continuous Integration", "👷"),
    ]


@dataclass
class ReleaseNotes:
    """Manually authored notes for one version"""

    highlights: Optional[str] = None
    breaking_changes: List[str] = field(default_factory=list)
    contributors: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReleaseNotes':
        """Create from dictionary"""
        return cls(
            highlights=_pick(data, 'highlights'),
            breaking_changes=_string_list(_pick(data, 'breaking_changes', 'breakingChanges')),
            contributors=_string_list(_pick(data, 'contributors')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'highlights': self.highlights,
            'breaking_changes': list(self.breaking_changes),
            'contributors': list(self.contributors),
        })


@dataclass
class ChangelogConfig:
    """Changelog generation settings"""

    enabled: bool = True
    format: str = "markdown"
    output_file: str = "CHANGELOG.md"
    from_tag: Optional[str] = None
    append: bool = True
    use_last_state: bool = True
    include_breaking_changes: bool = True
    include_contributors: bool = True
    include_stats: bool = True
    include_compare_links: bool = True
    group_by_version: bool = True
    releases: Dict[str, ReleaseNotes] = field(default_factory=dict)
    commit_types: List[CommitType] = field(default_factory=default_commit_types)

    def notes_for(self, version: str) -> Optional[ReleaseNotes]:
        """Manual release notes for a version, with or without a leading ``v``"""
        if version in self.releases:
            return self.releases[version]
        return self.releases.get(version.lstrip('v'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ChangelogConfig':
        """Create from dictionary"""
        raw_types = _pick(data, 'commit_types', 'commitTypes')
        if raw_types is None:
            commit_types = default_commit_types()
        else:
            commit_types = [
                CommitType(
                    type=str(item.get('type', "")),
                    title=str(item.get('title', "")),
                    emoji=str(item.get('emoji', "")),
                )
                for item in raw_types if isinstance(item, dict)
            ]

        releases = {
            str(version): ReleaseNotes.from_dict(notes)
            for version, notes in (_pick(data, 'releases') or {}).items()
            if isinstance(notes, dict)
        }

        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            format=str(_pick(data, 'format', default="markdown")),
            output_file=str(_pick(data, 'output_file', 'outputFile', default="CHANGELOG.md")),
            from_tag=_pick(data, 'from_tag', 'fromTag'),
            append=bool(_pick(data, 'append', default=True)),
            use_last_state=bool(_pick(data, 'use_last_state', 'useLastState', default=True)),
            include_breaking_changes=bool(
                _pick(data, 'include_breaking_changes', 'includeBreakingChanges', default=True)
            ),
            include_contributors=bool(
                _pick(data, 'include_contributors', 'includeContributors', default=True)
            ),
            include_stats=bool(_pick(data, 'include_stats', 'includeStats', default=True)),
            include_compare_links=bool(
                _pick(data, 'include_compare_links', 'includeCompareLinks', default=True)
            ),
            group_by_version=bool(_pick(data, 'group_by_version', 'groupByVersion', default=True)),
            releases=releases,
            commit_types=commit_types,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'enabled': self.enabled,
            'format': self.format,
            'output_file': self.output_file,
            'from_tag': self.from_tag,
            'append': self.append,
            'use_last_state': self.use_last_state,
            'include_breaking_changes': self.include_breaking_changes,
            'include_contributors': self.include_contributors,
            'include_stats': self.include_stats,
            'include_compare_links': self.include_compare_links,
            'group_by_version': self.group_by_version,
            'releases': {version: notes.to_dict() for version, notes in self.releases.items()},
            'commit_types': [
                {'type': ct.type, 'title': ct.title, 'emoji': ct.emoji}
                for ct in self.commit_types
            ],
        }
        return _prune(data)


@dataclass
class FirebaseDestinationConfig:
    """Firebase App Distribution settings"""

    enabled: bool = False
    service_account: str = "credentials/firebase-service-account.json"
    google_services: Optional[str] = None
    app_id: Optional[str] = None
    test_groups: List[str] = field(default_factory=lambda: ["qa-team"])
    release_notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FirebaseDestinationConfig':
        """Create from dictionary; a declared block is enabled unless stated otherwise"""
        groups = _pick(data, 'test_groups', 'testGroups')
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            service_account=_pick(data, 'service_account', 'serviceAccount',
                                  default="credentials/firebase-service-account.json"),
            google_services=_pick(data, 'google_services', 'googleServices'),
            app_id=_pick(data, 'app_id', 'appId'),
            test_groups=_string_list(groups) if groups is not None else ["qa-team"],
            release_notes=_pick(data, 'release_notes', 'releaseNotes'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'service_account': self.service_account,
            'google_services': self.google_services,
            'app_id': self.app_id,
            'test_groups': list(self.test_groups),
            'release_notes': self.release_notes,
        })


@dataclass
class PlayConsoleDestinationConfig:
    """Google Play Console settings"""

    enabled: bool = False
    service_account: str = "credentials/play-console-service-account.json"
    package_name: str = ""
    track: str = "internal"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayConsoleDestinationConfig':
        """Create from dictionary"""
        return cls(
            enabled=bool(_pick(data, 'enabled', default=False)),
            service_account=_pick(data, 'service_account', 'serviceAccount',
                                  default="credentials/play-console-service-account.json"),
            package_name=_pick(data, 'package_name', 'packageName', default=""),
            track=_pick(data, 'track', default="internal"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'service_account': self.service_account,
            'package_name': self.package_name or None,
            'track': self.track,
        })


@dataclass
class LocalDestinationConfig:
    """Local directory destination settings"""

    enabled: bool = False
    output_dir: str = DEFAULT_LOCAL_DEPLOY_DIR

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LocalDestinationConfig':
        """Create from dictionary"""
        return cls(
            enabled=bool(_pick(data, 'enabled', default=False)),
            output_dir=_pick(data, 'output_dir', 'outputDir', default=DEFAULT_LOCAL_DEPLOY_DIR),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {'enabled': self.enabled, 'output_dir': self.output_dir}


@dataclass
class AppStoreConnectDestinationConfig:
    """TestFlight or App Store settings"""

    enabled: bool = False
    api_key_path: str = "credentials/app-store-connect-api-key.json"
    bundle_id: str = ""
    team_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any],
                  default_enabled: bool) -> 'AppStoreConnectDestinationConfig':
        """Create from dictionary"""
        return cls(
            enabled=bool(_pick(data, 'enabled', default=default_enabled)),
            api_key_path=_pick(data, 'api_key_path', 'apiKeyPath',
                               default="credentials/app-store-connect-api-key.json"),
            bundle_id=_pick(data, 'bundle_id', 'bundleId', default=""),
            team_id=_pick(data, 'team_id', 'teamId', default=""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'api_key_path': self.api_key_path,
            'bundle_id': self.bundle_id or None,
            'team_id': self.team_id or None,
        })


@dataclass
class AndroidDeployConfig:
    """Android destinations"""

    enabled: bool = True
    artifact_path: str = DEFAULT_ANDROID_ARTIFACT
    firebase: FirebaseDestinationConfig = field(default_factory=FirebaseDestinationConfig)
    play_console: PlayConsoleDestinationConfig = field(default_factory=PlayConsoleDestinationConfig)
    local: LocalDestinationConfig = field(default_factory=LocalDestinationConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AndroidDeployConfig':
        """Create from dictionary"""
        firebase = _section(data, 'firebase')
        play_console = _section(data, 'play_console', 'playConsole')
        local = _section(data, 'local')
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            artifact_path=_pick(data, 'artifact_path', 'artifactPath',
                                default=DEFAULT_ANDROID_ARTIFACT),
            firebase=(FirebaseDestinationConfig.from_dict(firebase)
                      if firebase is not None else FirebaseDestinationConfig()),
            play_console=(PlayConsoleDestinationConfig.from_dict(play_console)
                          if play_console is not None else PlayConsoleDestinationConfig()),
            local=(LocalDestinationConfig.from_dict(local)
                   if local is not None else LocalDestinationConfig()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {'enabled': self.enabled, 'artifact_path': self.artifact_path}
        if self.firebase.enabled:
            data['firebase'] = self.firebase.to_dict()
        if self.play_console.enabled:
            data['play_console'] = self.play_console.to_dict()
        if self.local.enabled:
            data['local'] = self.local.to_dict()
        return data


@dataclass
class IosDeployConfig:
    """iOS destinations"""

    enabled: bool = True
    artifact_path: str = DEFAULT_IOS_ARTIFACT
    testflight: AppStoreConnectDestinationConfig = field(
        default_factory=AppStoreConnectDestinationConfig
    )
    app_store: AppStoreConnectDestinationConfig = field(
        default_factory=AppStoreConnectDestinationConfig
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IosDeployConfig':
        """Create from dictionary"""
        testflight = _section(data, 'testflight', 'testFlight')
        app_store = _section(data, 'app_store', 'appStore')
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            artifact_path=_pick(data, 'artifact_path', 'artifactPath', default=DEFAULT_IOS_ARTIFACT),
            testflight=(AppStoreConnectDestinationConfig.from_dict(testflight, True)
                        if testflight is not None else AppStoreConnectDestinationConfig()),
            app_store=(AppStoreConnectDestinationConfig.from_dict(app_store, False)
                       if app_store is not None else AppStoreConnectDestinationConfig()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {'enabled': self.enabled, 'artifact_path': self.artifact_path}
        if self.testflight.enabled:
            data['testflight'] = self.testflight.to_dict()
        if self.app_store.enabled:
            data['app_store'] = self.app_store.to_dict()
        return data


@dataclass
class FlavorGroup:
    """Named set of Android flavors deployed together"""

    name: str = ""
    description: Optional[str] = None
    flavors: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> 'FlavorGroup':
        """Create from dictionary"""
        return cls(
            name=_pick(data, 'name', default=key),
            description=_pick(data, 'description'),
            flavors=_string_list(_pick(data, 'flavors')),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'name': self.name,
            'description': self.description,
            'flavors': list(self.flavors),
        })


@dataclass
class DeployConfig:
    """Deployment settings for all platforms"""

    enabled: bool = True
    android: Optional[AndroidDeployConfig] = None
    ios: Optional[IosDeployConfig] = None
    default_group: Optional[str] = None
    flavor_groups: Dict[str, FlavorGroup] = field(default_factory=dict)

    def for_platform(self, platform: Platform):
        """Deploy block for a platform, or None when absent"""
        return self.android if platform == Platform.ANDROID else self.ios

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """Create from dictionary"""
        android = _section(data, 'android')
        ios = _section(data, 'ios')
        groups = _pick(data, 'flavor_groups', 'flavorGroups') or {}
        return cls(
            enabled=bool(_pick(data, 'enabled', default=True)),
            android=AndroidDeployConfig.from_dict(android) if android is not None else None,
            ios=IosDeployConfig.from_dict(ios) if ios is not None else None,
            default_group=_pick(data, 'default_group', 'defaultGroup'),
            flavor_groups={
                str(key): FlavorGroup.from_dict(str(key), value)
                for key, value in groups.items() if isinstance(value, dict)
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'enabled': self.enabled,
            'default_group': self.default_group,
            'flavor_groups': {key: group.to_dict() for key, group in self.flavor_groups.items()},
            'android': self.android.to_dict() if self.android else None,
            'ios': self.ios.to_dict() if self.ios else None,
        })


@dataclass
class SlackNotifyConfig:
    enabled: bool = False
    webhook_url: str = ""
    channel: Optional[str] = None
    notify_on: List[str] = field(default_factory=lambda: ["success", "failure"])


@dataclass
class EmailNotifyConfig:
    enabled: bool = False
    recipients: List[str] = field(default_factory=list)
    notify_on: List[str] = field(default_factory=lambda: ["failure"])


@dataclass
class WebhookNotifyConfig:
    enabled: bool = False
    url: str = ""
    events: List[str] = field(default_factory=list)


@dataclass
class NotifyConfig:
    """Notification channels"""

    slack: SlackNotifyConfig = field(default_factory=SlackNotifyConfig)
    email: EmailNotifyConfig = field(default_factory=EmailNotifyConfig)
    webhook: WebhookNotifyConfig = field(default_factory=WebhookNotifyConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NotifyConfig':
        """Create from dictionary"""
        slack = _section(data, 'slack') or {}
        email = _section(data, 'email') or {}
        webhook = _section(data, 'webhook') or {}
        return cls(
            slack=SlackNotifyConfig(
                enabled=bool(_pick(slack, 'enabled', default=False)),
                webhook_url=_pick(slack, 'webhook_url', 'webhookUrl', default=""),
                channel=_pick(slack, 'channel'),
                notify_on=_string_list(_pick(slack, 'notify_on', 'notifyOn',
                                             default=["success", "failure"])),
            ),
            email=EmailNotifyConfig(
                enabled=bool(_pick(email, 'enabled', default=False)),
                recipients=_string_list(_pick(email, 'recipients')),
                notify_on=_string_list(_pick(email, 'notify_on', 'notifyOn', default=["failure"])),
            ),
            webhook=WebhookNotifyConfig(
                enabled=bool(_pick(webhook, 'enabled', default=False)),
                url=_pick(webhook, 'url', default=""),
                events=_string_list(_pick(webhook, 'events')),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, keeping only enabled channels"""
        data = {}
        if self.slack.enabled:
            data['slack'] = _prune({
                'enabled': True,
                'webhook_url': self.slack.webhook_url,
                'channel': self.slack.channel,
                'notify_on': list(self.slack.notify_on),
            })
        if self.email.enabled:
            data['email'] = _prune({
                'enabled': True,
                'recipients': list(self.email.recipients),
                'notify_on': list(self.email.notify_on),
            })
        if self.webhook.enabled:
            data['webhook'] = _prune({
                'enabled': True,
                'url': self.webhook.url,
                'events': list(self.webhook.events),
            })
        return data


@dataclass
class ReportConfig:
    """Build report settings"""

    enabled: bool = False
    format: str = "html"
    include: List[str] = field(
        default_factory=lambda: ["build_info", "git_info", "build_duration"]
    )
    output_path: str = "./build-reports"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReportConfig':
        """Create from dictionary"""
        include = _pick(data, 'include')
        return cls(
            enabled=bool(_pick(data, 'enabled', default=False)),
            format=_pick(data, 'format', default="html"),
            include=(_string_list(include) if include is not None
                     else ["build_info", "git_info", "build_duration"]),
            output_path=_pick(data, 'output_path', 'outputPath', default="./build-reports"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'enabled': self.enabled,
            'format': self.format,
            'include': list(self.include),
            'output_path': self.output_path,
        }


@dataclass
class Config:
    """Root configuration for a mobilectl project"""

    app: AppConfig = field(default_factory=AppConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    version: VersionConfig = field(default_factory=VersionConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    env: Dict[str, str] = field(default_factory=dict)

    def getenv(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Resolve a variable from the config overlay, then the process environment"""
        if name in self.env:
            return self.env[name]
        return os.environ.get(name, default)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Create from dictionary

        Args:
            data: Parsed YAML mapping; None yields the defaults

        Returns:
            Config instance
        """
        data = data or {}
        return cls(
            app=AppConfig.from_dict(_section(data, 'app') or {}),
            build=BuildConfig.from_dict(_section(data, 'build') or {}),
            version=VersionConfig.from_dict(_section(data, 'version') or {}),
            changelog=ChangelogConfig.from_dict(_section(data, 'changelog') or {}),
            deploy=DeployConfig.from_dict(_section(data, 'deploy') or {}),
            notify=NotifyConfig.from_dict(_section(data, 'notify') or {}),
            report=ReportConfig.from_dict(_section(data, 'report') or {}),
            env={str(k): str(v) for k, v in (_section(data, 'env') or {}).items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return _prune({
            'app': self.app.to_dict(),
            'build': self.build.to_dict(),
            'version': self.version.to_dict(),
            'changelog': self.changelog.to_dict(),
            'deploy': self.deploy.to_dict(),
            'notify': self.notify.to_dict(),
            'report': self.report.to_dict() if self.report.enabled else None,
            'env': dict(self.env),
        })
