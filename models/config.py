from dataclasses import dataclass

DEFAULT_EXCLUSION_TAG = "do-not-purge"


@dataclass(frozen=True)
class ArrConfig:
    base_uri: str
    api_key: str
    exclusion_tag_name: str = DEFAULT_EXCLUSION_TAG
    request_timeout: int = 30
    verify_ssl: bool = True


@dataclass(frozen=True)
class RadarrConfig(ArrConfig):
    pass


@dataclass(frozen=True)
class SonarrConfig(ArrConfig):
    pass


@dataclass(frozen=True)
class Config:
    radarr: RadarrConfig
    sonarr: SonarrConfig
    dry_run: bool = True
    max_age_days: int = 90
