"""Configuration properties describing the service's metadata."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import ProxyProperties


class ElementProperties(BaseModel):
    id: str
    name: str | None = None
    description: str | None = None
    default: bool = False


class TypeProperties(ElementProperties):
    action: str = "/starter.zip"
    build: str | None = None


class DependencyProperties(ElementProperties):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    scope: str = "compile"
    version_range: str | None = None
    starter: bool = True


class DependencyGroupProperties(BaseModel):
    name: str
    version_range: str | None = None
    content: list[DependencyProperties] = Field(default_factory=list)


class InitializrEnvironment(BaseModel):
    """Service environment, bound from ``initializr.env``."""

    spring_boot_metadata_url: str = "https://spring.io/project_metadata/spring-boot"
    artifact_repository: str = "https://repo.spring.io/release/"
    fallback_application_name: str = "Application"
    force_ssl: bool = True
    proxy: ProxyProperties = Field(default_factory=ProxyProperties)


def _default_types() -> list[TypeProperties]:
    return [
        TypeProperties(id="maven-project", name="Maven Project", build="maven", default=True),
        TypeProperties(id="gradle-project", name="Gradle Project", build="gradle"),
    ]


def _default_packagings() -> list[ElementProperties]:
    return [
        ElementProperties(id="jar", name="Jar", default=True),
        ElementProperties(id="war", name="War"),
    ]


def _default_java_versions() -> list[ElementProperties]:
    return [
        ElementProperties(id="1.8", name="1.8", default=True),
        ElementProperties(id="1.7", name="1.7"),
    ]


def _default_languages() -> list[ElementProperties]:
    return [
        ElementProperties(id="java", name="Java", default=True),
        ElementProperties(id="groovy", name="Groovy"),
        ElementProperties(id="kotlin", name="Kotlin"),
    ]


class InitializrProperties(BaseSettings):
    """Everything the metadata is built from, bound from ``initializr``.

    Lists such as ``dependencies`` are usually supplied from a YAML file;
    scalar settings can also be set through ``INITIALIZR_`` environment
    variables (``INITIALIZR_ENV__FORCE_SSL=false``).
    """

    dependencies: list[DependencyGroupProperties] = Field(default_factory=list)
    types: list[TypeProperties] = Field(default_factory=_default_types)
    packagings: list[ElementProperties] = Field(default_factory=_default_packagings)
    java_versions: list[ElementProperties] = Field(default_factory=_default_java_versions)
    languages: list[ElementProperties] = Field(default_factory=_default_languages)
    boot_versions: list[ElementProperties] = Field(default_factory=list)

    group_id: str = "com.example"
    artifact_id: str = "demo"
    version: str = "0.0.1-SNAPSHOT"
    name: str = "demo"
    description: str = "Demo project for Spring Boot"
    package_name: str | None = None

    env: InitializrEnvironment = Field(default_factory=InitializrEnvironment)

    model_config = SettingsConfigDict(
        env_prefix="INITIALIZR_",
        env_nested_delimiter="__",
        extra="ignore",
    )
