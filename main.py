import argparse
import json
from pathlib import Path

from loguru import logger

from tasteid.core.config import APP_VERSION
from tasteid.core.logging import configure_logging
from tasteid.models.rating import AlbumMetadata, Rating
from tasteid.services.profile.service import TasteIDService
from tasteid.services.sources import InMemoryAlbumCatalog, InMemoryRatingStore


def load_service(path: Path) -> TasteIDService:
    """Build a service from a JSON export with "albums" and "ratings" arrays."""
    data = json.loads(path.read_text(encoding="utf-8"))
    albums = InMemoryAlbumCatalog(AlbumMetadata.model_validate(a) for a in data.get("albums", []))
    ratings = InMemoryRatingStore(Rating.model_validate(r) for r in data.get("ratings", []))
    logger.info(f"Loaded {len(data.get('albums', []))} albums and {len(data.get('ratings', []))} ratings")
    return TasteIDService(ratings=ratings, albums=albums)


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute TasteIDs from a ratings export")
    parser.add_argument("export", type=Path)
    parser.add_argument("user", help="User to profile")
    parser.add_argument("--compare", help="Second user for a compatibility report")
    parser.add_argument("--similar", type=int, metavar="N", help="Rank the N most compatible users in the export")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--version", action="version", version=f"tasteid {APP_VERSION}")
    args = parser.parse_args()

    configure_logging(args.log_level)
    service = load_service(args.export)

    if args.similar:
        tasters = service.find_similar_tasters(args.user, service.ratings.user_ids(), limit=args.similar)
        print(json.dumps([t.model_dump(mode="json") for t in tasters], indent=2))
    elif args.compare:
        result = service.compute_compatibility(
            service.compute_taste_signal(args.user), service.compute_taste_signal(args.compare)
        )
        print(result.model_dump_json(indent=2))
    else:
        print(service.compute_profile(args.user).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
