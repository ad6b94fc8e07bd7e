from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .dir_utils import domain_to_base_dn, split_names, under_base
from .directory.models import DirectoryConfig
from .members.classifier import ContainerLabels
from .utils import clamp_int


DEFAULT_USER_ATTRIBUTES = (
    "displayName,cn,mail,telephoneNumber,mobile,physicalDeliveryOfficeName,"
    "department,division,title,cernAccountType,memberOf"
)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    ldap_host: str = Field("xldap.cern.ch", alias="LDAP_HOST")
    ldap_port: int = Field(389, alias="LDAP_PORT")
    ldap_use_ssl: bool = Field(False, alias="LDAP_USE_SSL")
    ldap_starttls: bool = Field(False, alias="LDAP_STARTTLS")
    ldap_tls_validate: bool = Field(True, alias="LDAP_TLS_VALIDATE")
    ldap_bind_dn: str = Field("", alias="LDAP_BIND_DN")
    ldap_bind_password: str = Field("", alias="LDAP_BIND_PASSWORD")
    ldap_domain: str = Field("cern.ch", alias="LDAP_DOMAIN")
    ldap_user_base: str = Field("", alias="LDAP_USER_BASE")
    ldap_group_base: str = Field("", alias="LDAP_GROUP_BASE")
    ldap_connect_timeout: int = Field(5, alias="LDAP_CONNECT_TIMEOUT")
    ldap_size_limit: int = Field(0, alias="LDAP_SIZE_LIMIT")

    group_label: str = Field("e-groups", alias="LOOKUP_GROUP_LABEL")
    user_label: str = Field("Users", alias="LOOKUP_USER_LABEL")
    externals_label: str = Field("Externals", alias="LOOKUP_EXTERNALS_LABEL")
    user_attributes: str = Field(DEFAULT_USER_ATTRIBUTES, alias="LOOKUP_USER_ATTRIBUTES")
    user_sort_key: str = Field("displayName", alias="LOOKUP_USER_SORT_KEY")
    resolver_workers: int = Field(1, alias="LOOKUP_RESOLVER_WORKERS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("", alias="LOG_DIR")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")

    @property
    def base_dn(self) -> str:
        return domain_to_base_dn(self.ldap_domain)

    @property
    def user_base(self) -> str:
        return self.ldap_user_base or under_base("OU=Users,OU=Organic Units", self.base_dn)

    @property
    def group_base(self) -> str:
        return self.ldap_group_base or under_base("OU=e-groups,OU=Workgroups", self.base_dn)

    @property
    def displayed_attributes(self) -> list[str]:
        return split_names(self.user_attributes)

    @property
    def workers(self) -> int:
        return clamp_int(self.resolver_workers, default=1, min_v=1, max_v=16)


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()


def directory_config_from_env(env: EnvSettings) -> DirectoryConfig:
    return DirectoryConfig(
        host=env.ldap_host,
        port=env.ldap_port,
        use_ssl=env.ldap_use_ssl,
        starttls=env.ldap_starttls,
        bind_dn=env.ldap_bind_dn,
        bind_password=env.ldap_bind_password,
        domain=env.ldap_domain,
        tls_validate=env.ldap_tls_validate,
        connect_timeout=clamp_int(env.ldap_connect_timeout, default=5, min_v=1, max_v=120),
        size_limit=clamp_int(env.ldap_size_limit, default=0, min_v=0),
        user_base=env.user_base,
        group_base=env.group_base,
    )


def labels_from_env(env: EnvSettings) -> ContainerLabels:
    return ContainerLabels.for_domain(
        env.ldap_domain,
        group=env.group_label,
        user=env.user_label,
        externals=env.externals_label,
    )
