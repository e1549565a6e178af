"""
Medida Search - Router.
"""

from fastapi import APIRouter, Depends, Query

from medida.auth import User, get_current_user
from medida.deps import require_search
from medida.modules.search.schemas import SearchResponse
from medida.modules.search.service import SearchService

router = APIRouter(
    prefix="/search",
    tags=["search"],
    dependencies=[require_search],
)


def get_service() -> SearchService:
    """Get search service instance."""
    return SearchService()


@router.get("", response_model=SearchResponse)
async def search_products(
    q: str = Query(default="", max_length=200, description="Product code, description or any value"),
    user: User = Depends(get_current_user),
    service: SearchService = Depends(get_service),
):
    """Search products in every table."""
    results = await service.search(q)
    return SearchResponse(
        term=q.strip(),
        results=results,
        total_rows=sum(len(result.rows) for result in results),
    )
