"""
Field schemas for the five catalog content types.

Each schema lists the writable columns of one table, marks the
multilingual ones and carries the business rules enforced on write.
"""

from typing import Dict, List

from heritage_catalog.exceptions import UnknownContentTypeError
from heritage_catalog.validators.enum_validator import EnumValidator

from .update_payload import (
    FieldRule,
    FieldSchema,
    FieldSpec,
    clean_string,
    to_array,
    to_bool,
    to_float,
    to_int,
)

OEUVRE_STATUSES = ["brouillon", "en_attente", "publie", "rejete", "archive", "supprime"]
SERVICE_STATUSES = ["en_attente", "valide", "rejete"]
SERVICE_TYPES = ["restaurant", "hotel", "guide", "transport", "artisanat", "location", "autre"]
LIEU_TYPES = ["Wilaya", "Daira", "Commune"]
PATRIMOINE_TYPES = [
    "ville_village",
    "monument",
    "musee",
    "site_archeologique",
    "site_naturel",
    "edifice_religieux",
    "palais_forteresse",
    "autre",
]

# Title-like fields need text in at least one language.
TITLE_RULE = FieldRule("localized_text", {"non_empty": True, "message": "Text is required in at least one language"})
POSITIVE_ID = FieldRule("range", {"integer": True, "min": 1, "min_message": "Must be a positive identifier"})
NON_NEGATIVE = FieldRule("range", {"min": 0, "min_message": "Must not be negative"})
LATITUDE = FieldRule("range", {"min": -90, "max": 90})
LONGITUDE = FieldRule("range", {"min": -180, "max": 180})


def _enum(values: List[str]) -> FieldRule:
    return FieldRule("enum", EnumValidator.create_constraints(values))


def _text(name: str, **kwargs) -> FieldSpec:
    return FieldSpec(name, multilingual=True, **kwargs)


OEUVRE = FieldSchema(
    name="oeuvre",
    table="oeuvre",
    primary_key="id_oeuvre",
    fields=(
        _text("titre", rules=(TITLE_RULE,), required_on_create=True),
        _text("description", required_on_create=True),
        _text("resume"),
        FieldSpec(
            "id_type_oeuvre", coerce=to_int, rules=(POSITIVE_ID,),
            required_on_create=True, aliases=("idTypeOeuvre",),
        ),
        FieldSpec("id_langue", coerce=to_int, rules=(POSITIVE_ID,), aliases=("idLangue",)),
        FieldSpec("annee_creation", coerce=to_int, rules=(FieldRule("year"),), aliases=("anneeCreation",)),
        FieldSpec("isbn", coerce=clean_string, rules=(FieldRule("isbn"),)),
        FieldSpec("editeur", coerce=clean_string),
        FieldSpec("pages", coerce=to_int, rules=(NON_NEGATIVE,)),
        FieldSpec("duree", coerce=to_int, rules=(NON_NEGATIVE,)),
        FieldSpec("prix", coerce=to_float, rules=(NON_NEGATIVE,)),
        FieldSpec("devise", coerce=clean_string, default="DZD"),
        FieldSpec("image_url", coerce=clean_string, aliases=("imageUrl",)),
        FieldSpec("cover_url", coerce=clean_string, aliases=("coverUrl",)),
        FieldSpec("statut", rules=(_enum(OEUVRE_STATUSES),), default="brouillon"),
        FieldSpec("est_mis_en_avant", coerce=to_bool, default=False, aliases=("estMisEnAvant",)),
        FieldSpec("categories", coerce=to_array),
        FieldSpec("tags", coerce=to_array),
    ),
)

PATRIMOINE = FieldSchema(
    name="patrimoine",
    table="patrimoine",
    primary_key="id_patrimoine",
    fields=(
        _text("nom", rules=(TITLE_RULE,), required_on_create=True),
        _text("description"),
        _text("histoire"),
        _text("adresse"),
        FieldSpec(
            "type_patrimoine", rules=(_enum(PATRIMOINE_TYPES),),
            default="monument", aliases=("typePatrimoine",),
        ),
        FieldSpec("id_lieu", coerce=to_int, rules=(POSITIVE_ID,), required_on_create=True, aliases=("idLieu",)),
        FieldSpec("latitude", coerce=to_float, rules=(LATITUDE,)),
        FieldSpec("longitude", coerce=to_float, rules=(LONGITUDE,)),
        FieldSpec("annee_construction", coerce=to_int, aliases=("anneeConstruction",)),
        FieldSpec("tarif_entree", coerce=to_float, rules=(NON_NEGATIVE,), aliases=("tarifEntree",)),
    ),
)

LIEU = FieldSchema(
    name="lieu",
    table="lieu",
    primary_key="id_lieu",
    fields=(
        _text("nom", rules=(TITLE_RULE,), required_on_create=True),
        _text("adresse"),
        FieldSpec("type_lieu", rules=(_enum(LIEU_TYPES),), required_on_create=True, aliases=("typeLieu",)),
        FieldSpec("commune_id", coerce=to_int, rules=(POSITIVE_ID,), required_on_create=True, aliases=("communeId",)),
        FieldSpec("localite_id", coerce=to_int, rules=(POSITIVE_ID,), aliases=("localiteId",)),
        FieldSpec("latitude", coerce=to_float, rules=(LATITUDE,), required_on_create=True),
        FieldSpec("longitude", coerce=to_float, rules=(LONGITUDE,), required_on_create=True),
    ),
)

INTERVENANT = FieldSchema(
    name="intervenant",
    table="intervenant",
    primary_key="id_intervenant",
    fields=(
        _text("nom", rules=(TITLE_RULE,), required_on_create=True),
        _text("prenom"),
        _text("biographie"),
        _text("titre_professionnel"),
        FieldSpec("lieu_naissance", coerce=clean_string),
        FieldSpec("lieu_deces", coerce=clean_string),
        FieldSpec("organisation", coerce=clean_string),
        FieldSpec("email", coerce=clean_string),
        FieldSpec("telephone", coerce=clean_string),
        FieldSpec("wikipedia_url", coerce=clean_string),
        FieldSpec("langues_parlees", coerce=to_array),
        FieldSpec("actif", coerce=to_bool, default=True),
        FieldSpec("verifie", coerce=to_bool, default=False),
    ),
)

SERVICES = FieldSchema(
    name="services",
    table="services",
    primary_key="id",
    fields=(
        _text("nom", rules=(TITLE_RULE,), required_on_create=True),
        _text("description"),
        _text("adresse"),
        _text("horaires"),
        FieldSpec("type_service", rules=(_enum(SERVICE_TYPES),), required_on_create=True),
        FieldSpec("id_lieu", coerce=to_int, rules=(POSITIVE_ID,)),
        FieldSpec("latitude", coerce=to_float, rules=(LATITUDE,)),
        FieldSpec("longitude", coerce=to_float, rules=(LONGITUDE,)),
        FieldSpec("telephone", coerce=clean_string),
        FieldSpec("email", coerce=clean_string),
        FieldSpec("site_web", coerce=clean_string),
        FieldSpec("tarif_min", coerce=to_float, rules=(NON_NEGATIVE,)),
        FieldSpec("tarif_max", coerce=to_float, rules=(NON_NEGATIVE,)),
        FieldSpec("statut", rules=(_enum(SERVICE_STATUSES),), default="en_attente"),
        FieldSpec("photo_url", coerce=clean_string),
        FieldSpec("disponible", coerce=to_bool, default=True),
    ),
)

_SCHEMAS: Dict[str, FieldSchema] = {
    schema.name: schema for schema in (OEUVRE, PATRIMOINE, LIEU, INTERVENANT, SERVICES)
}


def get_schema(content_type: str) -> FieldSchema:
    """
    Schema registered for a content type.

    Raises:
        UnknownContentTypeError: no schema under that name
    """
    schema = _SCHEMAS.get(content_type)
    if schema is None:
        raise UnknownContentTypeError(content_type)
    return schema


def list_content_types() -> List[str]:
    return list(_SCHEMAS)
