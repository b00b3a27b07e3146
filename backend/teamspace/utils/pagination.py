"""목록 API 공용 페이지네이션 유틸리티입니다."""

import math
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Query


def page_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    pages = math.ceil(total / limit) if total > 0 else 0
    return {"current": page, "pages": pages, "total": total}


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, page_meta(total, page, limit)
