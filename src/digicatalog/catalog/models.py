""" Payload models for the Digi-API catalog

All models are frozen pydantic models. JSON keys are camelCase on the wire
and snake_case in Python; unknown keys are kept on the model as extras so
nothing the server sends is lost.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """ Common configuration for all upstream payloads """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra='allow'
    )


class Digimon(ApiModel):
    """ One entry of the catalog listing """
    id: int
    name: str
    href: Optional[str] = None
    image: Optional[str] = None

    @property
    def image_url(self) -> Optional[str]:
        return self.image or None


class Pageable(ApiModel):
    """ Pagination metadata as reported by the server """
    current_page: Optional[int] = None
    elements_on_page: Optional[int] = None
    total_elements: Optional[int] = None
    total_pages: Optional[int] = None
    previous_page: Optional[str] = None
    next_page: Optional[str] = None


class DigimonListResponse(ApiModel):
    """ Body of GET /digimon """
    content: Tuple[Digimon, ...]
    pageable: Optional[Pageable] = None


class CatalogPage(BaseModel):
    """ One page of catalog entries handed to the caller

    Pages built from a search fan-out are synthesized: they carry no
    pageable and never report more pages.
    """
    model_config = ConfigDict(frozen=True)

    items: Tuple[Digimon, ...]
    page_size: int
    pageable: Optional[Pageable] = None
    synthesized: bool = False

    @property
    def has_more_pages(self) -> bool:
        # The server does not always report totals, a full page is the signal
        if self.synthesized:
            return False
        return len(self.items) == self.page_size

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(item.id for item in self.items)


class DigimonImage(ApiModel):
    href: str
    transparent: Optional[bool] = None


class Level(ApiModel):
    id: Optional[int] = None
    level: Optional[str] = None


class DigimonType(ApiModel):
    id: Optional[int] = None
    type: Optional[str] = None


class DigimonAttribute(ApiModel):
    id: Optional[int] = None
    attribute: Optional[str] = None


class Field(ApiModel):
    id: Optional[int] = None
    field: Optional[str] = None
    image: Optional[str] = None


class Description(ApiModel):
    origin: Optional[str] = None
    language: Optional[str] = None
    description: Optional[str] = None


class Skill(ApiModel):
    id: Optional[int] = None
    skill: Optional[str] = None
    translation: Optional[str] = None
    description: Optional[str] = None


class Evolution(ApiModel):
    """ Link to a prior or next evolution """
    id: Optional[int] = None
    digimon: Optional[str] = None
    condition: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None


class DigimonDetail(ApiModel):
    """ Body of GET /digimon/{id}

    Every section is optional; an absent section and an empty one both mean
    there is nothing to show.
    """
    id: int
    name: str
    x_antibody: Optional[bool] = None
    images: Optional[Tuple[DigimonImage, ...]] = None
    levels: Optional[Tuple[Level, ...]] = None
    types: Optional[Tuple[DigimonType, ...]] = None
    attributes: Optional[Tuple[DigimonAttribute, ...]] = None
    fields: Optional[Tuple[Field, ...]] = None
    release_date: Optional[str] = None
    descriptions: Optional[Tuple[Description, ...]] = None
    skills: Optional[Tuple[Skill, ...]] = None
    prior_evolutions: Optional[Tuple[Evolution, ...]] = None
    next_evolutions: Optional[Tuple[Evolution, ...]] = None

    @property
    def primary_image_url(self) -> Optional[str]:
        """ href of the first image, if any """
        if self.images:
            return self.images[0].href
        return None

    def description_for(self, language: str = 'en_us') -> Optional[str]:
        """ First description text in the given language """
        for entry in self.descriptions or ():
            if entry.language == language and entry.description:
                return entry.description
        return None
