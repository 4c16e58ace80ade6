"""Terminal client that reuses the in-process query service."""
from __future__ import annotations

import argparse
import asyncio
import uuid
from typing import Iterable

from app.fields import LEVEL, PRODUCT_ID, PRODUCT_NAME, STORE_ID
from app.main import get_service
from app.models import ProductQuery

GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


def pretty_print_page(query: str, page) -> None:
    duration_ms = page.duration * 1000
    color = GREEN if duration_ms < 200 else RED
    print(
        f"Query: {query} | matches: {page.count} | page {page.pageIndex} (size {page.pageSize}) | "
        f"took: {color}{duration_ms:.1f} ms{RESET}"
    )
    for idx, item in enumerate(page.results, start=page.pageIndex * page.pageSize + 1):
        print(f"  {idx:03d}. {item.get(PRODUCT_ID)} | {item.get(PRODUCT_NAME)}")


def pretty_print_availability(results: list) -> None:
    print(f"Stores: {len(results)}")
    for item in results:
        print(f"  {item.get(STORE_ID)} | {item.get(PRODUCT_ID)} | {item.get(LEVEL)}")


async def run(args: argparse.Namespace) -> None:
    service = get_service()
    try:
        if args.command == "products":
            criteria = ProductQuery(
                query=args.query,
                sortByField=args.sort,
                sortByDirection=args.direction,
                pageIndex=args.page,
                pageSize=args.size,
            )
            page = await service.search_products(criteria, args.lon, args.lat, f"cli-{uuid.uuid4().hex}")
            pretty_print_page(args.query, page)
        elif args.command == "availability":
            pretty_print_availability(await service.availability(args.lon, args.lat, args.sku))
        elif args.command == "breweries":
            for suggestion in await service.breweries(args.prefix):
                print(f"  {suggestion.name} | id={suggestion.id or '-'} | icon={suggestion.icon or '-'}")
        elif args.command == "foods":
            for name in await service.foods(args.prefix):
                print(f"  {name}")
    finally:
        service.dispatcher.shutdown(wait=True)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="CLI client for the product discovery service")
    sub = parser.add_subparsers(dest="command", required=True)

    products = sub.add_parser("products", help="Full-text product search")
    products.add_argument("query", nargs="?", default="*")
    products.add_argument("--lon", type=float, required=True)
    products.add_argument("--lat", type=float, required=True)
    products.add_argument("--page", type=int, default=0)
    products.add_argument("--size", type=int, default=10)
    products.add_argument("--sort", help="Field to sort by")
    products.add_argument("--direction", default="Ascending")

    availability = sub.add_parser("availability", help="Stock levels around a point")
    availability.add_argument("--lon", type=float, required=True)
    availability.add_argument("--lat", type=float, required=True)
    availability.add_argument("--sku")

    for name in ("breweries", "foods"):
        suggest = sub.add_parser(name, help=f"Autocomplete {name}")
        suggest.add_argument("prefix", nargs="?", default="")

    args = parser.parse_args(list(argv) if argv is not None else None)
    asyncio.run(run(args))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
