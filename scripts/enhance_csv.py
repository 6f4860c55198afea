"""
Enhance a product CSV end to end: infer field mappings, normalize rows, enhance listings
"""

import sys
import json
import argparse
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.services.common.errors import ListingEnhancerError
from src.services.enhancement import ListingEnhancementService
from src.services.field_mapping import StandardField, detect_mappings_heuristically
from src.services.ingestion import CSVLoader
from src.services.ingestion.config import OUTPUT_DIR
from src.services.llm_gateway import CancellationToken
from src.services.prompts import MARKETPLACES


def print_header(text):
    """Print formatted header"""
    print("\n" + "=" * 80)
    print(f"  {text}")
    print("=" * 80)


def parse_args():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_path", type=Path, help="Product CSV file")
    parser.add_argument("--marketplace", default="Amazon", help=f"One of {MARKETPLACES}")
    parser.add_argument("--model", default="gpt4o", help="gpt4o, claude, gemini, mistral, llama")
    parser.add_argument("--output", type=Path, help="Output JSON path")
    parser.add_argument("--limit", type=int, help="Only enhance the first N rows")
    parser.add_argument("--timeout", type=float, help="Overall deadline in seconds")
    parser.add_argument(
        "--heuristic-mapping",
        action="store_true",
        help="Map columns by name instead of asking the model",
    )
    return parser.parse_args()


def main():
    args = parse_args()

    if not args.csv_path.exists():
        print(f"CSV file not found: {args.csv_path.absolute()}")
        return 1

    output_path = args.output or OUTPUT_DIR / f"{args.csv_path.stem}_enhanced.json"

    print_header("LISTING ENHANCEMENT")
    print(f"CSV file: {args.csv_path.absolute()}")
    print(f"Marketplace: {args.marketplace}")
    print(f"Model: {args.model}")

    try:
        service = ListingEnhancementService()
        loader = CSVLoader()

        df = loader.load(args.csv_path)
        if args.limit:
            df = df.head(args.limit)
        rows = loader.to_rows(df)
        headers = list(df.columns)

        # Step 1: Field mappings
        print_header("FIELD MAPPINGS")
        if args.heuristic_mapping:
            mappings = detect_mappings_heuristically(headers)
        else:
            mappings = service.infer_mappings(headers, loader.get_sample_rows(df))

        for m in mappings:
            target = m.standard_field.value
            if m.standard_field == StandardField.UNMAPPED:
                target = "(unmapped)"
            print(f"  {m.original_column:<30} -> {target:<15} {m.confidence:.2f}")

        # Step 2: Normalize and enhance
        records = service.normalize_rows(rows, mappings)
        token = CancellationToken(timeout=args.timeout)

        print_header(f"ENHANCING {len(records)} RECORDS")
        try:
            batch = service.process_batch(records, args.marketplace, args.model, token)
        except KeyboardInterrupt:
            print("\nInterrupted")
            return 130

        print(f"Successful: {batch.successful}/{batch.total_processed} ({batch.success_rate:.1%})")
        print(f"Marketplace-ready listings: {batch.valid_listings}/{batch.successful}")
        print(f"Processing time: {batch.processing_time:.1f}s")
        if batch.cancelled:
            print("Batch was cancelled before completion")

        failures = [r for r in batch.results if not r.enhanced]
        for failure in failures[:5]:
            print(f"  - {failure.product_id}: {failure.error}")

        # Step 3: Write output
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(
            json.dumps(batch.model_dump(mode="json"), indent=2, ensure_ascii=False)
        )
        print(f"\nResults written to: {output_path.absolute()}")

    except ListingEnhancerError as e:
        print(f"\nERROR [{e.code}]: {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
