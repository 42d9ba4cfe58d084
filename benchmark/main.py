"""
Benchmark sederhana Google Analytics Reporting API
==================================================
Jalankan report yang sama dengan processor NiFi, tapi dari command line.
Berguna untuk cek key / view id sebelum deploy, dan ukur latency batchGet.

Dependency:
    pip install -e .

Konfigurasi lewat environment variable (bisa juga lewat file .env):
    GA_KEY_FILE          path ke service account JSON (wajib)
    GA_VIEW_ID           view id (wajib)
    GA_APPLICATION_NAME, GA_START_DATE, GA_END_DATE
    GA_DIMENSIONS, GA_METRICS, GA_PAGE_SIZE, GA_PAGE_TOKEN
    GA_ORDER_BY_ASC, GA_ORDER_BY_DSC
    BENCH_REPEATS        jumlah pengulangan (default 3)
    GA_OUTPUT_FILE       simpan response terakhir ke file ini (opsional)

Default mengikuti default property processor:
    application_name=NiFi, start_date=7DaysAgo, end_date=today,
    dimensions=ga:pageTitle, metrics=ga:sessions, page_size=1000
"""

import os
import statistics as stats
import sys
import time
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from ga_reporting import ReportConfig, ReportError, build_service, fetch_report

load_dotenv()

# =============================================================================
# CONFIG
# =============================================================================

GA_KEY_FILE = os.getenv("GA_KEY_FILE", "")
GA_OUTPUT_FILE = os.getenv("GA_OUTPUT_FILE", "")

# Jumlah pengulangan benchmark
REPEATS = int(os.getenv("BENCH_REPEATS", "3"))


def read_config(key_json: str) -> ReportConfig:
    """Property processor diambil dari env GA_<NAMA_PROPERTY>."""
    return ReportConfig.from_properties({
        "google_key_json": key_json,
        "application_name": os.getenv("GA_APPLICATION_NAME", "NiFi"),
        "start_date": os.getenv("GA_START_DATE", "7DaysAgo"),
        "end_date": os.getenv("GA_END_DATE", "today"),
        "view_id": os.getenv("GA_VIEW_ID", ""),
        "dimensions": os.getenv("GA_DIMENSIONS", "ga:pageTitle"),
        "metrics": os.getenv("GA_METRICS", "ga:sessions"),
        "page_size": os.getenv("GA_PAGE_SIZE", "1000"),
        "page_token": os.getenv("GA_PAGE_TOKEN", ""),
        "order_by_asc": os.getenv("GA_ORDER_BY_ASC", ""),
        "order_by_dsc": os.getenv("GA_ORDER_BY_DSC", ""),
    })


# =============================================================================
# UTIL
# =============================================================================

def format_stats(times_ms: List[float]) -> str:
    if not times_ms:
        return "no data"
    return (
        f"min={min(times_ms):.2f} ms, "
        f"max={max(times_ms):.2f} ms, "
        f"mean={stats.mean(times_ms):.2f} ms, "
        f"median={stats.median(times_ms):.2f} ms"
    )


# =============================================================================
# GOOGLE ANALYTICS BENCHMARK
# =============================================================================

def bench_report(config: ReportConfig, repeats: int = REPEATS) -> Tuple[List[float], Optional[str]]:
    """
    Jalankan batchGet beberapa kali dan kembalikan list waktu (ms) + response JSON
    dari eksekusi terakhir. Client dibuat sekali, tidak ikut diukur.
    """
    service = build_service(config.key_json, config.application_name)

    times_ms: List[float] = []
    last_json = None

    try:
        for i in range(repeats):
            t0 = time.perf_counter()
            last_json = fetch_report(config, service=service)
            t1 = time.perf_counter()

            elapsed_ms = (t1 - t0) * 1000
            times_ms.append(elapsed_ms)
            print(f"[GA] Run {i + 1}/{repeats}: {elapsed_ms:.2f} ms, bytes={len(last_json)}")
    finally:
        service.close()

    return times_ms, last_json


def main():
    if not GA_KEY_FILE:
        print("GA_KEY_FILE belum di-set", file=sys.stderr)
        return 2

    try:
        with open(GA_KEY_FILE, encoding="utf-8") as f:
            key_json = f.read()
    except OSError as e:
        print(f"Tidak bisa baca GA_KEY_FILE: {e}", file=sys.stderr)
        return 2

    try:
        config = read_config(key_json)
    except ReportError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    print("Google Analytics config:")
    print(f"  view_id={config.view_id} range={config.start_date}..{config.end_date}")
    print(f"  dimensions={config.dimensions} metrics={config.metrics} page_size={config.page_size}")
    print(f"\nRepeats: {REPEATS}\n")

    try:
        times_ms, last_json = bench_report(config, repeats=REPEATS)
    except ReportError as e:
        print(f"Report error: {e}", file=sys.stderr)
        return 1

    print("\n-- Summary --")
    print(f"Google Analytics: {format_stats(times_ms)}")

    if GA_OUTPUT_FILE and last_json is not None:
        with open(GA_OUTPUT_FILE, "w", encoding="utf-8") as f:
            f.write(last_json)
        print(f"Response terakhir disimpan di {GA_OUTPUT_FILE}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
