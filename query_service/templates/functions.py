"""
Bibliothèque de fonctions disponibles dans les templates de requêtes.

Toutes les fonctions sont pures ; l'heure courante passe par une horloge
injectée pour que le rendu reste reproductible en test.
"""

import json
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

Clock = Callable[[], datetime]

DateLike = Union[datetime, date, str, int, float]

_DURATION_RE = re.compile(r"([+-]?\d+(?:\.\d+)?)(ms|h|m|s)")
_WORD_BOUNDARY_RE = re.compile(r"[\s\-_]+")
_CAMEL_SPLIT_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# taille maximale du texte produit par repeat
MAX_REPEAT_LENGTH = 100000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ==================== CHAÎNES ====================

def trim(value: Any) -> str:
    return str(value).strip()


def trim_prefix(value: Any, prefix: str) -> str:
    text = str(value)
    return text[len(prefix):] if prefix and text.startswith(prefix) else text


def trim_suffix(value: Any, suffix: str) -> str:
    text = str(value)
    return text[:-len(suffix)] if suffix and text.endswith(suffix) else text


def trunc(value: Any, length: int) -> str:
    text = str(value)
    if length < 0:
        return text[length:]
    return text[:length]


def repeat(value: Any, count: int) -> str:
    text = str(value)
    if len(text) * count > MAX_REPEAT_LENGTH:
        raise ValueError(f"repeat would produce more than {MAX_REPEAT_LENGTH} characters")
    return text * count


def contains(value: Any, needle: str) -> bool:
    return needle in str(value)


def has_prefix(value: Any, prefix: str) -> bool:
    return str(value).startswith(prefix)


def has_suffix(value: Any, suffix: str) -> bool:
    return str(value).endswith(suffix)


def _words(value: Any) -> List[str]:
    text = _CAMEL_SPLIT_RE.sub(" ", str(value))
    return [w for w in _WORD_BOUNDARY_RE.split(text) if w]


def snakecase(value: Any) -> str:
    return "_".join(w.lower() for w in _words(value))


def kebabcase(value: Any) -> str:
    return "-".join(w.lower() for w in _words(value))


def camelcase(value: Any) -> str:
    return "".join(w[:1].upper() + w[1:].lower() for w in _words(value))


def nospace(value: Any) -> str:
    return "".join(str(value).split())


def quote(value: Any) -> str:
    """Guillemets doubles avec échappement JSON."""
    return json.dumps("" if value is None else str(value))


def squote(value: Any) -> str:
    return "'" + ("" if value is None else str(value)) + "'"


def split(value: Any, separator: str = ",") -> List[str]:
    text = str(value)
    if not text:
        return []
    return text.split(separator)


# ==================== VALEURS PAR DÉFAUT ====================

def empty(value: Any) -> bool:
    """Vrai pour None, chaîne vide, zéro, collection vide."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False


def coalesce(*values: Any) -> Any:
    for value in values:
        if not empty(value):
            return value
    return None


def ternary(condition: Any, true_value: Any, false_value: Any) -> Any:
    return true_value if condition else false_value


# ==================== DATES ====================

def to_date(value: DateLike) -> datetime:
    """Convertit une date ISO, un timestamp ou une date en datetime."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return date_parser.isoparse(str(value).strip())


def parse_duration(duration: str) -> timedelta:
    """Parse une durée courte du type ``-24h``, ``1h30m``, ``90s``, ``500ms``."""
    text = str(duration).strip()
    if not text:
        raise ValueError("empty duration")
    sign = -1 if text.startswith("-") else 1
    body = text.lstrip("+-")
    matches = list(_DURATION_RE.finditer(body))
    if not matches or "".join(m.group(0) for m in matches) != body:
        raise ValueError(f"invalid duration: {duration!r}")
    total = timedelta()
    for match in matches:
        amount = float(match.group(1))
        unit = match.group(2)
        if unit == "h":
            total += timedelta(hours=amount)
        elif unit == "m":
            total += timedelta(minutes=amount)
        elif unit == "s":
            total += timedelta(seconds=amount)
        else:
            total += timedelta(milliseconds=amount)
    return total * sign


def format_date(value: DateLike, fmt: str = "%Y-%m-%d") -> str:
    return to_date(value).strftime(fmt)


def date_modify(value: DateLike, duration: str) -> datetime:
    return to_date(value) + parse_duration(duration)


def date_add(
    value: DateLike,
    years: int = 0,
    months: int = 0,
    weeks: int = 0,
    days: int = 0,
    hours: int = 0,
    minutes: int = 0,
) -> datetime:
    return to_date(value) + relativedelta(
        years=years, months=months, weeks=weeks, days=days, hours=hours, minutes=minutes
    )


def unix_epoch(value: DateLike) -> int:
    dt = to_date(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def iso8601(value: DateLike) -> str:
    return to_date(value).isoformat()


# ==================== LISTES / MAPS ====================

def make_list(*items: Any) -> List[Any]:
    return list(items)


def append(items: Optional[Iterable[Any]], item: Any) -> List[Any]:
    return list(items or []) + [item]


def first(items: Any) -> Any:
    items = list(items or [])
    return items[0] if items else None


def last(items: Any) -> Any:
    items = list(items or [])
    return items[-1] if items else None


def uniq(items: Iterable[Any]) -> List[Any]:
    seen: List[Any] = []
    for item in items or []:
        if item not in seen:
            seen.append(item)
    return seen


def compact(items: Iterable[Any]) -> List[Any]:
    return [item for item in items or [] if not empty(item)]


def keys(mapping: Dict[str, Any]) -> List[str]:
    return sorted(mapping.keys())


def values(mapping: Dict[str, Any]) -> List[Any]:
    return [mapping[k] for k in sorted(mapping.keys())]


def has_key(mapping: Dict[str, Any], key: str) -> bool:
    return key in mapping


def pluck(key: str, *mappings: Dict[str, Any]) -> List[Any]:
    return [m[key] for m in mappings if key in m]


def to_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)


# ==================== ENREGISTREMENT ====================

def build_filters() -> Dict[str, Callable[..., Any]]:
    """Filtres ajoutés aux filtres Jinja2 natifs (upper, lower, title, trim, replace, join...)."""
    return {
        "trim_prefix": trim_prefix,
        "trim_suffix": trim_suffix,
        "trunc": trunc,
        "repeat": repeat,
        "contains": contains,
        "has_prefix": has_prefix,
        "has_suffix": has_suffix,
        "snakecase": snakecase,
        "kebabcase": kebabcase,
        "camelcase": camelcase,
        "nospace": nospace,
        "quote": quote,
        "squote": squote,
        "split": split,
        "empty": empty,
        "date": format_date,
        "date_modify": date_modify,
        "date_add": date_add,
        "to_date": to_date,
        "unix_epoch": unix_epoch,
        "iso8601": iso8601,
        "append": append,
        "uniq": uniq,
        "compact": compact,
        "keys": keys,
        "values": values,
        "to_json": to_json,
    }


def build_globals(clock: Clock = utc_now) -> Dict[str, Callable[..., Any]]:
    """Fonctions appelables directement dans les templates."""
    return {
        "now": clock,
        "upper": lambda value: str(value).upper(),
        "lower": lambda value: str(value).lower(),
        "title": lambda value: str(value).title(),
        "trim": trim,
        "trim_prefix": trim_prefix,
        "trim_suffix": trim_suffix,
        "replace": lambda value, old, new: str(value).replace(old, new),
        "contains": contains,
        "has_prefix": has_prefix,
        "has_suffix": has_suffix,
        "quote": quote,
        "split": split,
        "join": lambda separator, items: separator.join(str(i) for i in items),
        "empty": empty,
        "coalesce": coalesce,
        "ternary": ternary,
        "date": format_date,
        "date_modify": date_modify,
        "date_add": date_add,
        "to_date": to_date,
        "unix_epoch": unix_epoch,
        "iso8601": iso8601,
        "list": make_list,
        "append": append,
        "first": first,
        "last": last,
        "uniq": uniq,
        "compact": compact,
        "keys": keys,
        "values": values,
        "has_key": has_key,
        "pluck": pluck,
        "to_json": to_json,
    }
