from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple
from urllib.parse import urlparse

import requests
from pydantic import ValidationError

from core.config import settings
from core.errors import AppError, BadRequestError, UpstreamError
from models.recipe import RecipeCreate, RecipeImportResult
from models.units import Unit, parse_unit
from services.recipe_service import recipe_service

log = logging.getLogger("kitchen_pal.import")

USER_AGENT = "KitchenPal/1.0 (+recipe import)"
CHUNK_SIZE = 64 * 1024


def _read_capped(resp: requests.Response, max_bytes: int) -> bytes:
    chunks: List[bytes] = []
    size = 0
    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
        size += len(chunk)
        if size > max_bytes:
            raise UpstreamError("Recipe page is too large", {"max_bytes": max_bytes})
        chunks.append(chunk)
    return b"".join(chunks)


def _as_int(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None  # t.ex. "3-4"
    return None


def _ingredient_from_payload(raw: Dict[str, Any]) -> Dict[str, Any] | None:
    name = raw.get("ingredient_name") or raw.get("name")
    if not name:
        return None
    raw_unit = raw.get("unit")
    unit = parse_unit(raw_unit) if raw_unit is None or isinstance(raw_unit, str) else None
    return {
        "ingredient_name": name,
        "quantity": raw.get("quantity", raw.get("amount", 0)) or 0,
        "unit": unit if unit is not None else Unit.NONE,
        "is_optional": bool(raw.get("is_optional", False)),
        "notes": raw.get("notes"),
    }


def recipe_from_payload(item: Dict[str, Any]) -> RecipeCreate:
    """Tolka en importpost. Tillåter både name/title och instructions/steps."""
    # Nycklar med null behandlas som saknade
    steps = item.get("steps") or []
    instructions = item.get("instructions")
    if not instructions and isinstance(steps, list):
        instructions = "\n".join(s for s in steps if isinstance(s, str))
    raw_ingredients = item.get("ingredients") or []
    if not isinstance(raw_ingredients, list):
        raise ValueError("ingredients must be a list")
    ingredients = [
        parsed
        for parsed in (_ingredient_from_payload(ing) for ing in raw_ingredients if isinstance(ing, dict))
        if parsed is not None
    ]
    raw_tags = item.get("tags") or []
    if not isinstance(raw_tags, list):
        raise ValueError("tags must be a list")
    return RecipeCreate(
        name=item.get("name") or item.get("title") or "",
        description=item.get("description"),
        instructions=instructions or "",
        default_servings=_as_int(item.get("default_servings", item.get("servings"))) or 1,
        ingredients=ingredients,
        prep_time=item.get("prep_time"),
        cook_time=item.get("cook_time"),
        tags=[t for t in raw_tags if isinstance(t, str)],
        image_url=item.get("image_url"),
        source_name=item.get("source_name"),
        source_url=item.get("source_url"),
    )


class RecipeImportService:
    def import_payload(self, user_id: str, payload: Any) -> RecipeImportResult:
        # Stöd både för { "recipes": [...] } och ren list-root [...]
        if isinstance(payload, list):
            entries = payload
        elif isinstance(payload, dict):
            entries = payload.get("recipes", [])
        else:
            raise BadRequestError("Invalid import format")
        if not isinstance(entries, list):
            raise BadRequestError("Invalid import format")

        imported = 0
        skipped: List[str] = []
        for index, item in enumerate(entries):
            label = item.get("name") or item.get("title") if isinstance(item, dict) else None
            label = label or f"#{index + 1}"
            if not isinstance(item, dict):
                skipped.append(f"{label}: not an object")
                continue
            try:
                recipe_service.add_recipe(user_id, recipe_from_payload(item))
            except ValidationError as exc:
                skipped.append(f"{label}: {exc.error_count()} validation errors")
                continue
            except AppError as exc:
                skipped.append(f"{label}: {exc.message}")
                continue
            except (TypeError, ValueError) as exc:
                skipped.append(f"{label}: {exc}")
                continue
            imported += 1

        log.info("Imported %d of %d recipes for %s", imported, len(entries), user_id)
        return RecipeImportResult(imported=imported, total=len(entries), skipped=skipped)

    def fetch_page(self, url: str) -> Tuple[bytes, str]:
        """Hämta en receptsida server-side; returnerar (innehåll, content-type).

        Svaret läses i bitar och avbryts när det passerar RECIPE_FETCH_MAX_BYTES.
        """
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise BadRequestError("Only http and https URLs are supported")

        session = requests.Session()
        session.max_redirects = settings.recipe_fetch_max_redirects
        try:
            resp = session.get(
                url, timeout=settings.recipe_fetch_timeout, headers={"User-Agent": USER_AGENT}, stream=True
            )
            try:
                resp.raise_for_status()
                content = _read_capped(resp, settings.recipe_fetch_max_bytes)
            finally:
                resp.close()
        except requests.Timeout as exc:
            log.warning("Recipe fetch timed out for %s", url)
            raise UpstreamError("Timed out fetching recipe page") from exc
        except requests.RequestException as exc:
            log.warning("Recipe fetch failed for %s: %s", url, exc)
            raise UpstreamError("Failed to fetch recipe page", {"reason": str(exc)}) from exc
        finally:
            session.close()
        return content, resp.headers.get("Content-Type", "text/html")


recipe_import_service = RecipeImportService()

__all__ = ["RecipeImportService", "recipe_from_payload", "recipe_import_service"]
