from sqlalchemy import func
from sqlmodel import select

MAX_LIMIT = 100


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 20,
):
    if page < 1:
        page = 1

    if limit < 1:
        limit = 20
    limit = min(limit, MAX_LIMIT)

    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    return {
        "results": results,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit,
        },
    }
