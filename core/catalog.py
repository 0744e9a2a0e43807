"""
Catalog service for Care-Bot.

Owns the two read-only catalogs (FAQ entries and price entries). Each one
is read from JSON on first access, kept for the life of the process and
never reloaded. A missing or malformed file is logged and leaves that
catalog empty, so every lookup behaves as "no match".
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.context import CatalogEntry, EntryType, PriceEntry, QuickButton
from core.structured_logging import get_logger, log_catalog_load, timed

_logger = get_logger("core.catalog")

BUTTON_LABEL_LIMIT = 14

PRICE_FIELDS = [
    'price3y', 'price4y', 'price5y', 'price6y', 'activation',
    'prepay30_lump', 'prepay30_monthly', 'prepay50_lump', 'prepay50_monthly',
]


class CatalogError(Exception):
    """Raised when a catalog file cannot be read or parsed."""


def truncate_label(text: str, limit: int = BUTTON_LABEL_LIMIT) -> str:
    """Shorten a button label to `limit` characters plus '..'."""
    return text[:limit] + '..' if len(text) > limit else text


# =============================================================================
# Record parsing
# =============================================================================

def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ''


def _parse_quick_buttons(raw: Any) -> List[QuickButton]:
    """
    Parse configured follow-up buttons.

    Accepts plain strings (label derived from the text) or
    {"label", "text"} objects.
    """
    buttons = []
    for item in raw or []:
        if isinstance(item, str):
            text = item.strip()
            if text:
                buttons.append(QuickButton(label=truncate_label(text), text=text))
        elif isinstance(item, dict):
            text = _clean(item.get('text') or item.get('messageText'))
            if text:
                label = _clean(item.get('label')) or truncate_label(text)
                buttons.append(QuickButton(label=label, text=text))
    return buttons


def parse_catalog_entry(raw: Dict[str, Any]) -> CatalogEntry:
    """
    Build a CatalogEntry from one JSON record.

    Raises:
        CatalogError: If the record has no question or an unknown type
    """
    question = _clean(raw.get('question'))
    if not question:
        raise CatalogError("entry has no question")

    try:
        entry_type = EntryType(_clean(raw.get('type')) or EntryType.ANSWER.value)
    except ValueError as e:
        raise CatalogError(f"unknown entry type for '{question}': {raw.get('type')}") from e

    keywords = [_clean(k) for k in raw.get('keywords') or [] if _clean(k)]

    return CatalogEntry(
        type=entry_type,
        category=_clean(raw.get('category')),
        question=question,
        keywords=keywords,
        answer=_clean(raw.get('answer')),
        url=_clean(raw.get('url')) or None,
        url_label=_clean(raw.get('urlLabel') or raw.get('urlButton')) or None,
        quick_buttons=_parse_quick_buttons(raw.get('quickButtons')),
    )


def _to_price(value: Any) -> Optional[int]:
    """Blank, zero and non-numeric values become None."""
    if value is None or value == '':
        return None
    try:
        number = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return number or None


def parse_price_entry(raw: Dict[str, Any]) -> PriceEntry:
    """
    Build a PriceEntry from one JSON record.

    care_combined is computed from the three axes when the record lacks it.

    Raises:
        CatalogError: If the record has no model code
    """
    model_full = _clean(raw.get('modelFull'))
    if not model_full:
        raise CatalogError("price row has no modelFull")

    care_type = _clean(raw.get('careType'))
    care_detail = _clean(raw.get('careDetail'))
    visit_cycle = _clean(raw.get('visitCycle'))
    care_combined = _clean(raw.get('careCombined')) or ' '.join(
        part for part in (care_type, care_detail, visit_cycle) if part
    )

    return PriceEntry(
        model_full=model_full,
        product=_clean(raw.get('product')),
        care_type=care_type,
        care_detail=care_detail,
        visit_cycle=visit_cycle,
        care_combined=care_combined,
        **{name: _to_price(raw.get(name)) for name in PRICE_FIELDS},
    )


def _read_json(path: Path) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"cannot read {path}: {e}") from e


def read_faq_file(path: Path) -> List[CatalogEntry]:
    """
    Read the FAQ catalog. Malformed records are skipped with a warning.

    Raises:
        CatalogError: If the file is missing or is not a JSON list
    """
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise CatalogError(f"{path} must contain a JSON list")

    entries = []
    for idx, record in enumerate(raw):
        try:
            entries.append(parse_catalog_entry(record))
        except (CatalogError, AttributeError) as e:
            _logger.warning(
                f"Skipping FAQ record {idx}: {e}",
                extra={"event": "catalog_record_skipped", "source": str(path)}
            )
    return entries


def read_price_file(path: Path) -> Tuple[List[PriceEntry], str]:
    """
    Read the price table and its "as of" date.

    Accepts {"priceDate": ..., "items": [...]} or a bare list. Rows that
    repeat a (model, care_combined) pair are dropped, first one wins.

    Raises:
        CatalogError: If the file is missing or has an unexpected shape
    """
    raw = _read_json(path)
    if isinstance(raw, dict):
        price_as_of = _clean(raw.get('priceDate'))
        rows = raw.get('items') or []
    elif isinstance(raw, list):
        price_as_of = ''
        rows = raw
    else:
        raise CatalogError(f"{path} must contain a JSON object or list")

    if not isinstance(rows, list):
        raise CatalogError(f"{path}: 'items' must be a list")

    entries = []
    seen = set()
    for idx, record in enumerate(rows):
        try:
            entry = parse_price_entry(record)
        except (CatalogError, AttributeError) as e:
            _logger.warning(
                f"Skipping price row {idx}: {e}",
                extra={"event": "catalog_record_skipped", "source": str(path)}
            )
            continue
        key = (entry.model_full, entry.care_combined)
        if key in seen:
            continue
        seen.add(key)
        entries.append(entry)
    return entries, price_as_of


# =============================================================================
# Service
# =============================================================================

class CatalogService:
    """
    Read-only access to the FAQ and price catalogs.

    Each catalog is loaded on first access behind its own loaded flag.
    Construct one per process and share it.

    Example:
        catalog = CatalogService(Path("data/faq.json"), Path("data/price-data.json"))
        catalog.faq_entries     # loads faq.json once
        catalog.price_as_of     # loads price-data.json once
    """

    def __init__(self, faq_path: Path, price_path: Path):
        self.faq_path = Path(faq_path)
        self.price_path = Path(price_path)
        self._faq_entries: List[CatalogEntry] = []
        self._price_entries: List[PriceEntry] = []
        self._price_as_of = ''
        self._faq_loaded = False
        self._price_loaded = False

    @classmethod
    def from_settings(cls, settings) -> "CatalogService":
        return cls(settings.faq_path, settings.price_path)

    @property
    def faq_entries(self) -> List[CatalogEntry]:
        if not self._faq_loaded:
            self._load_faq()
        return self._faq_entries

    @property
    def price_entries(self) -> List[PriceEntry]:
        if not self._price_loaded:
            self._load_prices()
        return self._price_entries

    @property
    def price_as_of(self) -> str:
        if not self._price_loaded:
            self._load_prices()
        return self._price_as_of

    @timed("faq_catalog_load")
    def _load_faq(self) -> None:
        try:
            self._faq_entries = read_faq_file(self.faq_path)
            log_catalog_load(str(self.faq_path), len(self._faq_entries))
        except CatalogError as e:
            _logger.error(
                f"FAQ catalog unavailable: {e}",
                extra={"event": "catalog_load_failed", "source": str(self.faq_path)}
            )
            self._faq_entries = []
        self._faq_loaded = True

    @timed("price_catalog_load")
    def _load_prices(self) -> None:
        try:
            self._price_entries, self._price_as_of = read_price_file(self.price_path)
            log_catalog_load(
                str(self.price_path),
                len(self._price_entries),
                price_as_of=self._price_as_of or None,
            )
        except CatalogError as e:
            _logger.error(
                f"Price catalog unavailable: {e}",
                extra={"event": "catalog_load_failed", "source": str(self.price_path)}
            )
            self._price_entries = []
            self._price_as_of = ''
        self._price_loaded = True


class StaticCatalog(CatalogService):
    """Catalog service over in-memory records (console previews and tests)."""

    def __init__(
        self,
        faq_entries: Optional[List[CatalogEntry]] = None,
        price_entries: Optional[List[PriceEntry]] = None,
        price_as_of: str = '',
    ):
        super().__init__(Path(''), Path(''))
        self._faq_entries = list(faq_entries or [])
        self._price_entries = list(price_entries or [])
        self._price_as_of = price_as_of
        self._faq_loaded = True
        self._price_loaded = True
