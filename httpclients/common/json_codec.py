from __future__ import annotations

import dataclasses
import json
import types
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints

JSON_CONTENT_TYPE = "application/json"


def to_camel(name: str) -> str:
    """
    Назначение:
        Переводит snake_case в camelCase ("web"-именование полей JSON).
    Пример:
        file_name -> fileName, _private -> _private, value -> value
    """
    if "_" not in name.strip("_"):
        return name
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest if part)


def _to_jsonable(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            to_camel(f.name): _to_jsonable(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, dict):
        # ключи словарей не переименовываются
        return {k: _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_jsonable(item) for item in obj]
    if isinstance(obj, Enum):
        return _to_jsonable(obj.value)
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, (uuid.UUID, Decimal)):
        return str(obj)
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return _to_jsonable(obj.to_dict())
    return obj


def serialize(obj: Any) -> bytes | None:
    """
    Назначение:
        Сериализует тело запроса в UTF-8 JSON.

    Контракт:
        - None -> None (тело не прикрепляется).
        - dataclass -> объект с camelCase-ключами, dict -> ключи как есть.
        - Неподдерживаемые типы -> TypeError от json.dumps.
    """
    if obj is None:
        return None
    return json.dumps(_to_jsonable(obj), ensure_ascii=False).encode("utf-8")


def deserialize(content: bytes | str | None, target: Any = None) -> Any:
    """
    Назначение:
        Десериализует тело ответа в целевой тип.

    Контракт:
        - Пустое тело или JSON null -> None.
        - target None/Any/dict/list -> разобранный JSON как есть.
        - dataclass -> экземпляр; ключи сопоставляются без учёта регистра
          с именем поля и его camelCase-формой; лишние ключи игнорируются.
        - Класс с from_dict -> target.from_dict(data).

    Ошибки:
        ValueError (json.JSONDecodeError) на некорректном JSON.
        ValueError, если тип значения JSON не совпадает с аннотацией поля
        (int/float/str/bool, list/dict). int допускается для float.
    """
    if content is None:
        return None
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    if not content.strip():
        return None
    data = json.loads(content)
    if data is None:
        return None
    return _convert(data, target)


def _convert(value: Any, target: Any) -> Any:
    if value is None or target is None or target is Any:
        return value

    origin = get_origin(target)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        candidates = [arg for arg in get_args(target) if arg is not type(None)]
        if len(candidates) == 1:
            return _convert(value, candidates[0])
        return value
    if origin in (list, tuple, set, frozenset):
        if not isinstance(value, list):
            raise _mismatch(value, target)
        args = get_args(target)
        item_type = args[0] if args else None
        items = [_convert(item, item_type) for item in value]
        return origin(items) if origin is not list else items
    if origin is dict:
        if not isinstance(value, dict):
            raise _mismatch(value, target)
        args = get_args(target)
        value_type = args[1] if len(args) == 2 else None
        return {k: _convert(v, value_type) for k, v in value.items()}

    if isinstance(target, type):
        if dataclasses.is_dataclass(target):
            return _build_dataclass(value, target)
        if hasattr(target, "from_dict") and isinstance(value, dict):
            return target.from_dict(value)
        if issubclass(target, Enum):
            return target(value)
        if target is bool or target is str or target in (list, dict):
            if not isinstance(value, target):
                raise _mismatch(value, target)
            return value
        if target is int or target is float:
            # bool в JSON не является числом
            allowed = (int,) if target is int else (int, float)
            if isinstance(value, bool) or not isinstance(value, allowed):
                raise _mismatch(value, target)
            return target(value)
        if target is datetime and isinstance(value, str):
            return datetime.fromisoformat(value)
        if target is date and isinstance(value, str):
            return date.fromisoformat(value)
        if target in (uuid.UUID, Decimal) and isinstance(value, str):
            return target(value)
    return value


def _mismatch(value: Any, target: Any) -> ValueError:
    name = getattr(target, "__name__", None) or str(target)
    return ValueError(f"Cannot convert JSON {type(value).__name__} to {name}")


def _build_dataclass(data: Any, target: type) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"Cannot convert {type(data).__name__} to {target.__name__}")

    lowered = {str(k).lower(): v for k, v in data.items()}
    hints = get_type_hints(target)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(target):
        if not f.init:
            continue
        raw_key = None
        for candidate in (f.name.lower(), to_camel(f.name).lower()):
            if candidate in lowered:
                raw_key = candidate
                break
        if raw_key is not None:
            kwargs[f.name] = _convert(lowered[raw_key], hints.get(f.name))
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = None
    return target(**kwargs)


__all__ = ["JSON_CONTENT_TYPE", "deserialize", "serialize", "to_camel"]
