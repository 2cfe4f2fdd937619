"""Header normalisation: maps loose/localised CSV column names to field keys.

Spreadsheets arrive with headers in whatever vocabulary the author used
("Código", "data de aquisição", "Serial Number", ...). Every spelling in the
table below resolves to one canonical key; anything else passes through
untouched and is later ignored by the row validator.
"""
from collections.abc import Mapping
from types import MappingProxyType

CANONICAL_FIELDS: tuple[str, ...] = (
    "name",
    "code",
    "location",
    "unit",
    "status",
    "acquisition_date",
    "value",
    "serial_number",
    "color",
    "manufacturer",
    "model",
    "capacity",
    "voltage",
    "origin",
    "condition",
    "holder",
    "inalienable",
    "notes",
)

_SYNONYMS: dict[str, tuple[str, ...]] = {
    "name": ("nome",),
    "code": ("código", "codigo"),
    "location": ("localização", "localizacao", "local"),
    "unit": ("unity", "unidade"),
    "status": ("situação", "situacao"),
    "acquisition_date": (
        "acquisition date", "aquisição", "aquisicao", "data de aquisição",
        "data de aquisicao", "data_aquisicao", "data",
    ),
    "value": ("valor", "preço", "preco", "price"),
    "serial_number": ("serial number", "número de série", "numero de serie", "numero_serie", "serial"),
    "color": ("cor",),
    "manufacturer": ("fabricante", "marca", "brand"),
    "model": ("modelo",),
    "capacity": ("capacidade",),
    "voltage": ("voltagem", "tensão", "tensao"),
    "origin": ("origem",),
    "condition": ("condições", "condicoes", "condição", "condicao"),
    "holder": ("detentor", "responsável", "responsavel"),
    "inalienable": ("inalienável", "inalienavel"),
    "notes": ("observações", "observacoes", "obs", "notas"),
}


def _build_default_map() -> dict[str, str]:
    table: dict[str, str] = {}
    for field in CANONICAL_FIELDS:
        table[field] = field
        for alias in _SYNONYMS.get(field, ()):
            table[alias] = field
    return table


DEFAULT_HEADER_MAP: Mapping[str, str] = MappingProxyType(_build_default_map())


class HeaderNormalizer:
    """Case-insensitive lookup over an immutable synonym -> field-key table."""

    def __init__(self, mapping: Mapping[str, str] = DEFAULT_HEADER_MAP):
        self._mapping = MappingProxyType({k.strip().lower(): v for k, v in mapping.items()})

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._mapping

    def normalize(self, header: str) -> str:
        """Return the canonical key for ``header``, or ``header`` itself if unknown."""
        return self._mapping.get(header.strip().lower(), header)

    def __call__(self, header: str) -> str:
        return self.normalize(header)


default_normalizer = HeaderNormalizer()
