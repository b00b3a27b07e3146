"""공용 유틸리티 헬퍼입니다. 시간/검색어/JSON 리스트 정규화를 담당합니다."""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List


def utcnow() -> datetime:
    # DB에는 naive UTC로 저장한다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def like_pattern(search: str | None) -> str | None:
    text = (search or "").strip()
    if not text:
        return None
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def is_all(value: str | None) -> bool:
    return value is None or str(value).strip().lower() in {"", "all"}


def unique_ids(values: Iterable[Any]) -> List[int]:
    seen: List[int] = []
    for value in values or []:
        ident = int(value)
        if ident not in seen:
            seen.append(ident)
    return seen


def with_reaction(reactions: List[Dict[str, Any]], emoji: str, user_id: int) -> List[Dict[str, Any]]:
    # JSON 컬럼 변경 감지를 위해 항상 새 리스트를 반환한다.
    updated = [{"emoji": r["emoji"], "users": list(r.get("users") or [])} for r in reactions or []]
    entry = next((r for r in updated if r["emoji"] == emoji), None)
    if entry is None:
        entry = {"emoji": emoji, "users": []}
        updated.append(entry)
    if user_id not in entry["users"]:
        entry["users"].append(user_id)
    return updated


def without_reaction(reactions: List[Dict[str, Any]], emoji: str, user_id: int) -> List[Dict[str, Any]]:
    updated = []
    for r in reactions or []:
        users = list(r.get("users") or [])
        if r["emoji"] == emoji:
            users = [u for u in users if u != user_id]
            if not users:
                continue
        updated.append({"emoji": r["emoji"], "users": users})
    return updated
