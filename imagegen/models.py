"""
Input models - map metadata, star ratings and background transforms
"""

from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError

from utils.exceptions import MalformedInputError, MissingCoverError


class DifficultyKey(str, Enum):
    """Fixed difficulty vocabulary, in display order"""
    ES = "ES"
    NOR = "NOR"
    HARD = "HARD"
    EX = "EX"
    EXP = "EXP"

    @classmethod
    def parse(cls, value: Union[str, "DifficultyKey", None]) -> Optional["DifficultyKey"]:
        """Unknown keys map to None instead of raising"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class StarRatings(RootModel[Dict[str, Optional[str]]]):
    """
    Sparse mapping from difficulty key to a display string

    Values are either a decimal star value ("6.81") or a sentinel
    ("Unranked" / "Qualified"). Unknown keys are kept but never read.
    """

    root: Dict[str, Optional[str]] = Field(default_factory=dict)

    def get(self, key: Union[DifficultyKey, str, None]) -> Optional[str]:
        key = DifficultyKey.parse(key)
        if key is None:
            return None
        value = self.root.get(key.value)
        return value if value else None

    def present(self) -> Iterator[Tuple[DifficultyKey, str]]:
        """Non-empty entries in fixed key order"""
        for key in DifficultyKey:
            value = self.get(key)
            if value is not None:
                yield key, value


class MapMetadata(BaseModel):
    """Song/mapper metadata for one map"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    song_author_name: str = Field(alias="songAuthorName")
    song_name: str = Field(alias="songName")
    song_sub_name: Optional[str] = Field(None, alias="songSubName")
    level_author_name: str = Field(alias="levelAuthorName")
    duration: Optional[int] = None  # Seconds
    bpm: Optional[float] = None


class MapVersion(BaseModel):
    """One published version of a map"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    cover_url: str = Field(alias="coverURL")
    hash: Optional[str] = None


class MapInfo(BaseModel):
    """Map description as returned by the map catalog"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    metadata: MapMetadata
    versions: List[MapVersion] = Field(default_factory=list)

    @property
    def cover_url(self) -> str:
        """Cover of the first version"""
        if not self.versions:
            raise MissingCoverError(self.id)
        return self.versions[0].cover_url


class BackgroundTransform(BaseModel):
    """Caller-supplied affine transform for thumbnail backgrounds"""
    model_config = ConfigDict(extra="ignore")

    scale: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None

    def resolved(self) -> Tuple[float, float, float]:
        """(scale, translate_x, translate_y) with defaults applied"""
        scale = 1.0 if self.scale is None else self.scale
        return scale, self.x or 0.0, self.y or 0.0


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_model(model_cls: Type[ModelT], payload, what: str) -> ModelT:
    """
    Validate a loosely-typed payload into a model

    Args:
        model_cls: Target pydantic model
        payload: Model instance or plain dict
        what: Human-readable name used in the error message

    Returns:
        Validated model instance
    """
    if isinstance(payload, model_cls):
        return payload
    if payload is None and model_cls is StarRatings:
        return StarRatings({})
    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        raise MalformedInputError(f"Failed to parse {what}: {e}") from e
