import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from asterix_decoder.config import DecoderSettings, configure_logging
from asterix_decoder.decoders.asterix_file_reader import AsterixFileReader
from asterix_decoder.types.enums import BdsCodeOctet, BpsHoldScope
from asterix_decoder.utils.derived_processor import DerivedValueProcessor
from asterix_decoder.utils.handlers import decode_messages_parallel, summarize, truncated_result

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asterix-decoder",
        description="Decode an ASTERIX CAT048/CAT021 recording and print a summary.",
    )
    parser.add_argument("file", type=Path, help="ASTERIX recording (.ast)")
    parser.add_argument("--qnh", type=float, default=None,
                        help="actual QNH in hPa used when a report carries no valid setting")
    parser.add_argument("--workers", type=int, default=1,
                        help="decoder processes (0 = pick from the CPU count)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--bds-octet", default=BdsCodeOctet.LEADING.value,
                        choices=[choice.value for choice in BdsCodeOctet],
                        help="octet of each Mode S block carrying the BDS code")
    parser.add_argument("--bps-scope", default=BpsHoldScope.GLOBAL.value,
                        choices=[choice.value for choice in BpsHoldScope],
                        help="hold the last CAT021 pressure setting globally or per aircraft")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if not args.file.is_file():
        logger.error("Input file not found: %s", args.file)
        return 1

    settings = DecoderSettings(
        qnh_actual=args.qnh,
        bds_code_octet=BdsCodeOctet(args.bds_octet),
        bps_hold_scope=BpsHoldScope(args.bps_scope),
    )

    print(f"\n{'=' * 60}")
    print("ASTERIX CAT048 / CAT021 Decoder")
    print(f"{'=' * 60}")
    print(f"Input file: {args.file}")
    print(f"{'=' * 60}\n")

    # ============================================================
    # STEP 1: FRAME & DECODE
    # ============================================================
    print("Step 1: Reading and decoding ASTERIX data blocks...")
    torn = []
    messages = list(AsterixFileReader(str(args.file)).read_messages(on_truncated=torn.append))

    start_time = time.perf_counter()
    results = decode_messages_parallel(messages, settings, processes=args.workers or None)
    results.extend(truncated_result(error) for error in torn)
    elapsed_time = time.perf_counter() - start_time

    summary = summarize(results)
    print(f"   Decoded {summary['total_messages']:,} data blocks "
          f"({summary['total_records']:,} records) in {elapsed_time:.4f}s")
    for category, count in sorted(summary["messages"].items()):
        print(f"   CAT{category:03d}: {count:,} blocks, {summary['records'].get(category, 0):,} records")
    for failure, count in summary["failures"].items():
        print(f"   {failure.value}: {count:,}")

    # ============================================================
    # STEP 2: DERIVED VALUES
    # ============================================================
    print("\nStep 2: Scaling, QNH correction and positions...")
    derived = DerivedValueProcessor(settings).process_results(results)
    print(f"   CAT048 records: {len(derived.cat048):,}")
    print(f"   CAT021 records: {len(derived.cat021):,}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
