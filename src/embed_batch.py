"""Batch embed generation.

- Reads a CSV of embed requests:
    request_id, mode, place_id, query, lat, lng, origin, destination
- Builds one Maps Embed URL + iframe per row with config defaults applied
- Writes:
    * embeds CSV (request_id, mode, embed_status, embed_url, iframe_html, error_message)
    * JSONL log, one record per row (API key is never logged)
- Deterministic: preserves input order; no timestamps in CSV output

No network calls are made; the URLs are for the page that hosts the iframe.
"""

from __future__ import annotations

import argparse
import csv
import datetime as dt
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit

import config_loader  # type: ignore
import embed_client  # type: ignore
from embed_params import ValidationError  # type: ignore


OUTPUT_COLUMNS = [
    "request_id",
    "mode",
    "embed_status",
    "embed_url",
    "iframe_html",
    "error_message",
]

STATUS_OK = "OK"
STATUS_MISSING_API_KEY = "MISSING_API_KEY"
STATUS_INVALID_REQUEST = "INVALID_REQUEST"


@dataclass(frozen=True)
class EmbedResult:
    request_id: str
    mode: str
    embed_status: str
    embed_url: str
    iframe_html: str
    error_message: str


def _query_keys(url: str) -> List[str]:
    """Query parameter names of an embed URL, without the API key."""
    return [k for k, _ in parse_qsl(urlsplit(url).query) if k != "key"]


class EmbedLog:
    """JSONL record per embed request; only parameter names, never values."""

    def __init__(self, path: Optional[str]) -> None:
        self.path = path
        if path:
            Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)

    def record(self, res: EmbedResult) -> None:
        if not self.path:
            return
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "request_id": res.request_id,
            "mode": res.mode,
            "embed_status": res.embed_status,
            "param_keys": _query_keys(res.embed_url),
            "url_length": len(res.embed_url),
            "note": res.error_message or "OK",
        }
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")


def _required(row: Dict[str, str], col: str) -> str:
    value = (row.get(col) or "").strip()
    if not value:
        raise ValidationError(f"Column '{col}' is required for this mode.")
    return value


def _coord(row: Dict[str, str], col: str) -> float:
    value = _required(row, col)
    try:
        return float(value)
    except ValueError:
        raise ValidationError(f"Column '{col}' is not a number: {value!r}") from None


def build_embed_url(client: embed_client.EmbedBuilder, row: Dict[str, str]) -> str:
    """Dispatch one CSV row to the matching builder mode."""
    mode = (row.get("mode") or "").strip().lower()
    if mode == "place":
        return client.place(_required(row, "place_id"))
    if mode == "search":
        return client.search(_required(row, "query"))
    if mode == "view":
        return client.view(_coord(row, "lat"), _coord(row, "lng"))
    if mode == "directions":
        return client.directions(_required(row, "origin"), _required(row, "destination"))
    if mode == "streetview":
        return client.streetview(_coord(row, "lat"), _coord(row, "lng"))
    raise ValidationError(
        f"Invalid embed mode {mode!r}. Must be one of: "
        + ", ".join(embed_client.EMBED_MODES)
    )


def process_row(
    client: embed_client.EmbedBuilder,
    row: Dict[str, str],
    iframe_attrs: Dict[str, Any],
) -> EmbedResult:
    request_id = row.get("request_id", "")
    mode = (row.get("mode") or "").strip().lower()
    try:
        url = build_embed_url(client, row)
    except embed_client.MissingApiKeyError as e:
        return EmbedResult(request_id, mode, STATUS_MISSING_API_KEY, "", "", str(e))
    except ValidationError as e:
        return EmbedResult(request_id, mode, STATUS_INVALID_REQUEST, "", "", str(e))

    html = client.generate_iframe(url, iframe_attrs)
    return EmbedResult(request_id, mode, STATUS_OK, url, html, "")


def run_batch(
    input_csv_path: str,
    output_csv_path: str,
    config_path: str,
    log_path: Optional[str] = None,
    api_key: Optional[str] = None,
) -> int:
    """Read embed requests and write the embeds CSV.

    Returns number of rows.
    """
    cfg = config_loader.load_config(config_path)
    client = config_loader.build_client(cfg, api_key=api_key)
    if not client.get_api_key():
        print(
            f"WARNING: {cfg.api.google_maps_api_key_env} is not set; "
            "every row will be marked MISSING_API_KEY.",
            flush=True,
        )

    with open(input_csv_path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("Header row is required (CSV has no field names).")
        rows = list(reader)

    log = EmbedLog(log_path)
    iframe_attrs = {"width": str(cfg.iframe.width), "height": str(cfg.iframe.height)}

    results: List[EmbedResult] = []
    for row in rows:
        res = process_row(client, row, iframe_attrs)
        log.record(res)
        results.append(res)

    Path(os.path.dirname(output_csv_path) or ".").mkdir(parents=True, exist_ok=True)
    with open(output_csv_path, "w", encoding="utf-8", newline="") as f_out:
        writer = csv.DictWriter(f_out, fieldnames=OUTPUT_COLUMNS)
        writer.writeheader()
        for r in results:
            writer.writerow(
                {
                    "request_id": r.request_id,
                    "mode": r.mode,
                    "embed_status": r.embed_status,
                    "embed_url": r.embed_url,
                    "iframe_html": r.iframe_html,
                    "error_message": r.error_message,
                }
            )

    return len(results)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate Google Maps Embed URLs and iframes from a CSV of requests."
    )
    parser.add_argument("--input", required=True, help="Path to the requests CSV")
    parser.add_argument("--output", required=True, help="Path to write the embeds CSV")
    parser.add_argument("--config", required=True, help="Path to config/config.yml")
    parser.add_argument(
        "--log",
        required=False,
        default="data/logs/embed_log.jsonl",
        help="Path to JSONL log (default: data/logs/embed_log.jsonl)",
    )
    args = parser.parse_args()

    count = run_batch(
        input_csv_path=args.input,
        output_csv_path=args.output,
        config_path=args.config,
        log_path=args.log,
    )
    print(f"Generated {count} embeds -> {args.output}")


if __name__ == "__main__":
    main()
