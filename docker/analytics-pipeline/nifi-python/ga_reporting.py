"""
ga_reporting
============
Logic untuk ambil report dari Google Analytics Reporting API v4.
Tidak import nifiapi, jadi bisa dipakai processor NiFi maupun benchmark/main.py.

Alur:
  properties (string) -> ReportConfig -> request body -> reports.batchGet -> JSON

Output attributes (lihat ReportConfig.to_attributes):
  - mime.type (selalu application/json)
  - application_name, start_date, end_date, view_id
  - dimensions, metrics (CSV apa adanya)
  - page_size, page_token
  - order_by_dsc, order_by_asc
"""

import json
import logging
import re
from dataclasses import dataclass

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient import errors as api_errors
from googleapiclient.discovery import build
from googleapiclient.http import set_user_agent

APPLICATION_JSON = "application/json"
MIME_TYPE_ATTRIBUTE = "mime.type"

API_NAME = "analyticsreporting"
API_VERSION = "v4"
SCOPES = [
    "https://www.googleapis.com/auth/analytics",
    "https://www.googleapis.com/auth/analytics.readonly",
]

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"

_CSV_SPLIT = re.compile(r",[ ]*")
_DIGITS = re.compile(r"[0-9]+")

log = logging.getLogger(__name__)


class ReportError(Exception):
    """Satu-satunya error yang keluar dari modul ini; pesan = pesan error aslinya."""


# === PROPERTY DEFINITIONS ===
# Format sama dengan PROPERTY_DEFS di processor lain:
# {"name", "display", "description", "default", "required", "sensitive", "validator"}
# Validator: "NON_EMPTY", "NON_NEGATIVE_INTEGER"
PROPERTY_DEFS = [
    {
        "name": "google_key_json",
        "display": "Google Key JSON",
        "description": "Google service account API key in JSON format.",
        "default": None,
        "required": True,
        "sensitive": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "application_name",
        "display": "Application Name",
        "description": "Application name used for communicating with the Google API.",
        "default": "NiFi",
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "start_date",
        "display": "Start Date",
        "description": (
            "The inclusive start date for the query in the format YYYY-MM-DD. "
            "Cannot be after End Date. The format NdaysAgo, yesterday, or today is "
            "also accepted, and in that case, the date is inferred based on the "
            "property's reporting time zone."
        ),
        "default": "7DaysAgo",
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "end_date",
        "display": "End Date",
        "description": (
            "The inclusive end date for the query in the format YYYY-MM-DD. "
            "Cannot be before Start Date. The format NdaysAgo, yesterday, or "
            "today is also accepted, and in that case, the date is inferred based "
            "on the property's reporting time zone."
        ),
        "default": "today",
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "view_id",
        "display": "View ID",
        "description": (
            "A view is your access point for reports; a defined view of data from a "
            "property. You give users access to a view so they can see the reports "
            "based on that view's data. A property can contain one or more views."
        ),
        "default": None,
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "dimensions",
        "display": "Dimensions",
        "description": "Comma separated list of dimensions.",
        "default": "ga:pageTitle",
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "page_size",
        "display": "Page Size",
        "description": (
            "A query returns the default of 1,000 rows. The Analytics Core Reporting "
            "API returns a maximum of 100,000 rows per request."
        ),
        "default": "1000",
        "required": True,
        "validator": "NON_NEGATIVE_INTEGER",
    },
    {
        "name": "page_token",
        "display": "Page Token",
        "description": (
            "A continuation token to get the next page of the results. Adding this to "
            "the request will return the rows after the pageToken. The pageToken should "
            "be the value returned in the nextPageToken parameter."
        ),
        "default": None,
        "required": False,
        "validator": "NON_EMPTY",
    },
    {
        "name": "metrics",
        "display": "Metrics",
        "description": "Comma separated list of metrics.",
        "default": "ga:sessions",
        "required": True,
        "validator": "NON_EMPTY",
    },
    {
        "name": "order_by_dsc",
        "display": "Order Descending",
        "description": "Comma separated list of dimensions to sort descending by value.",
        "default": None,
        "required": False,
        "validator": "NON_EMPTY",
    },
    {
        "name": "order_by_asc",
        "display": "Order Ascending",
        "description": "Comma separated list of dimensions to sort ascending by value.",
        "default": None,
        "required": False,
        "validator": "NON_EMPTY",
    },
]

REQUIRED_PROPERTIES = [p["name"] for p in PROPERTY_DEFS if p.get("required")]


def split_csv(value):
    """Pecah CSV di koma + spasi setelahnya. Item kosong di akhir dibuang."""
    if not value:
        return []
    parts = _CSV_SPLIT.split(value)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def _parse_page_size(raw):
    # sama ketatnya dengan Integer.parseInt: hanya digit ASCII, tanpa spasi atau "_"
    if raw is None or not _DIGITS.fullmatch(str(raw)):
        raise ReportError(f"page_size must be a non-negative integer, got {raw!r}")
    return int(raw)


@dataclass
class ReportConfig:
    key_json: str
    application_name: str
    start_date: str
    end_date: str
    view_id: str
    dimensions: str
    metrics: str
    page_size: int
    page_token: str = ""
    order_by_dsc: str = ""
    order_by_asc: str = ""

    @classmethod
    def from_properties(cls, values):
        """
        Build config dari hasil evaluasi property (name -> string).
        Nilai None/"" untuk property wajib -> ReportError.
        """
        missing = [name for name in REQUIRED_PROPERTIES if not values.get(name)]
        if missing:
            raise ReportError(f"Missing required properties: {', '.join(missing)}")

        return cls(
            key_json=values["google_key_json"],
            application_name=values["application_name"],
            start_date=values["start_date"],
            end_date=values["end_date"],
            view_id=values["view_id"],
            dimensions=values["dimensions"],
            metrics=values["metrics"],
            page_size=_parse_page_size(values["page_size"]),
            page_token=values.get("page_token") or "",
            order_by_dsc=values.get("order_by_dsc") or "",
            order_by_asc=values.get("order_by_asc") or "",
        )

    def to_attributes(self):
        # key JSON sengaja tidak ikut (sensitive)
        return {
            MIME_TYPE_ATTRIBUTE: APPLICATION_JSON,
            "application_name": self.application_name,
            "view_id": self.view_id,
            "metrics": self.metrics,
            "dimensions": self.dimensions,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "page_size": str(self.page_size),
            "page_token": self.page_token,
            "order_by_dsc": self.order_by_dsc,
            "order_by_asc": self.order_by_asc,
        }


def _order_bys(csv_value, sort_order):
    return [
        {"fieldName": field, "orderType": "VALUE", "sortOrder": sort_order}
        for field in split_csv(csv_value)
    ]


def build_report_request(config, logger=None):
    """Map ReportConfig ke body GetReportsRequest (satu ReportRequest)."""
    logger = logger or log

    request = {
        "viewId": config.view_id,
        "dateRanges": [{"startDate": config.start_date, "endDate": config.end_date}],
        "metrics": [{"expression": m} for m in split_csv(config.metrics)],
        "dimensions": [{"name": d} for d in split_csv(config.dimensions)],
        "pageSize": config.page_size,
    }

    if config.page_token:
        request["pageToken"] = config.page_token

    asc = _order_bys(config.order_by_asc, ASCENDING)
    dsc = _order_bys(config.order_by_dsc, DESCENDING)
    if asc and dsc:
        logger.info(
            f"Both order_by_asc and order_by_dsc are set; using descending order "
            f"({config.order_by_dsc}) and ignoring ascending ({config.order_by_asc})"
        )
    if dsc:
        request["orderBys"] = dsc
    elif asc:
        request["orderBys"] = asc

    return {"reportRequests": [request]}


def load_credentials(key_json):
    try:
        info = json.loads(key_json)
        if not isinstance(info, dict):
            raise ValueError("Google key JSON must be an object")
        return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
    except (ValueError, GoogleAuthError) as e:
        raise ReportError(str(e)) from e


def build_service(key_json, application_name):
    """Credential -> AuthorizedHttp (user agent = application_name) -> discovery client."""
    credentials = load_credentials(key_json)
    try:
        http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
        http = set_user_agent(http, application_name)
        return build(API_NAME, API_VERSION, http=http, cache_discovery=False)
    except (api_errors.Error, httplib2.HttpLib2Error, OSError) as e:
        raise ReportError(str(e)) from e


def fetch_report(config, service=None, logger=None):
    """
    Panggil reports.batchGet sekali dan kembalikan response sebagai JSON string
    (pretty, indent 2). Semua error dibungkus jadi ReportError.

    Kalau service tidak dikasih, client dibuat di sini dan ditutup lagi setelah
    call. Service dari caller dibiarkan terbuka.
    """
    logger = logger or log

    if service is not None:
        return _batch_get(service, config, logger)

    service = build_service(config.key_json, config.application_name)
    try:
        return _batch_get(service, config, logger)
    finally:
        # httplib2 tidak menutup socket sendiri
        service.close()


def _batch_get(service, config, logger):
    body = build_report_request(config, logger=logger)
    logger.debug(
        f"batchGet view_id={config.view_id} range={config.start_date}..{config.end_date} "
        f"page_size={config.page_size} page_token={config.page_token or '-'}"
    )

    try:
        response = service.reports().batchGet(body=body).execute()
    except (api_errors.Error, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
        raise ReportError(str(e)) from e

    return json.dumps(response, indent=2)
