"""
Typed view of OpenNext's build output descriptor.

Field names are snake_case in Python; the descriptor's camelCase keys are
accepted on load and produced by ``model_dump(by_alias=True)``.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

REQUIRED_ORIGINS = ("s3", "default")


class ManifestModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class BaseFunction(ManifestModel):
    handler: str
    bundle: str


class MiddlewareFunction(BaseFunction):
    path_resolver: str = Field(alias="pathResolver")


class FunctionOrigin(BaseFunction):
    type: Literal["function"]
    wrapper: str
    converter: str
    streaming: Optional[bool] = None


class ServerFunctionOrigin(FunctionOrigin):
    queue: str
    incremental_cache: str = Field(alias="incrementalCache")
    tag_cache: str = Field(alias="tagCache")


class ImageOptimizationOrigin(FunctionOrigin):
    image_loader: str = Field(alias="imageLoader")


class CopyEntry(ManifestModel):
    from_: str = Field(alias="from")
    to: str
    cached: bool
    versioned_sub_dir: Optional[str] = Field(default=None, alias="versionedSubDir")


class S3Origin(ManifestModel):
    type: Literal["s3"]
    origin_path: str = Field(alias="originPath")
    copy_entries: List[CopyEntry] = Field(alias="copy")


Origin = Union[S3Origin, ImageOptimizationOrigin, ServerFunctionOrigin]


def parse_origin(data: Any) -> Any:
    """Pick the origin model from the entry's type and image loader."""
    if not isinstance(data, dict):
        return data
    if data.get("type") == "s3":
        return S3Origin.model_validate(data)
    if "imageLoader" in data or "image_loader" in data:
        return ImageOptimizationOrigin.model_validate(data)
    return ServerFunctionOrigin.model_validate(data)


class Behavior(ManifestModel):
    pattern: str
    origin: Optional[str] = None
    edge_function: Optional[str] = Field(default=None, alias="edgeFunction")


class AdditionalProps(ManifestModel):
    disable_incremental_cache: Optional[bool] = Field(default=None, alias="disableIncrementalCache")
    disable_tag_cache: Optional[bool] = Field(default=None, alias="disableTagCache")
    initialization_function: Optional[BaseFunction] = Field(default=None, alias="initializationFunction")
    warmer: Optional[BaseFunction] = None
    revalidation_function: Optional[BaseFunction] = Field(default=None, alias="revalidationFunction")


class DeploymentManifest(ManifestModel):
    """Functions, origins and ordered routing behaviors of a built site."""

    edge_functions: Dict[str, Union[MiddlewareFunction, BaseFunction]] = Field(default_factory=dict, alias="edgeFunctions")
    origins: Dict[str, Origin]
    behaviors: List[Behavior]
    additional_props: Optional[AdditionalProps] = Field(default=None, alias="additionalProps")

    @field_validator("edge_functions", mode="before")
    @classmethod
    def _middleware_entry(cls, value: Any) -> Any:
        if isinstance(value, dict) and isinstance(value.get("middleware"), dict):
            value = {**value, "middleware": MiddlewareFunction.model_validate(value["middleware"])}
        return value

    @field_validator("origins", mode="before")
    @classmethod
    def _typed_origins(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {name: parse_origin(origin) for name, origin in value.items()}
        return value

    @model_validator(mode="after")
    def _reserved_origins(self) -> "DeploymentManifest":
        missing = [key for key in REQUIRED_ORIGINS if key not in self.origins]
        if missing:
            raise ValueError(f"origins is missing required entries: {', '.join(missing)}")
        if not isinstance(self.origins["s3"], S3Origin):
            raise ValueError('origins["s3"] must be an s3 origin')
        return self

    @property
    def middleware(self) -> Optional[MiddlewareFunction]:
        fn = self.edge_functions.get("middleware")
        return fn if isinstance(fn, MiddlewareFunction) else None

    @property
    def s3_origin(self) -> S3Origin:
        return self.origins["s3"]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PrerenderManifest(ManifestModel):
    version: int
    routes: Dict[str, Any] = Field(default_factory=dict)


class BuildMetadata(ManifestModel):
    build_id: str = Field(alias="buildId")
    prerender_manifest: Optional[PrerenderManifest] = Field(default=None, alias="prerenderManifest")
