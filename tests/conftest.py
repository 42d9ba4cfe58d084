"""Shared fixtures for the Google Analytics processor tests."""

import importlib
import json
import sys
import types
from unittest.mock import MagicMock

import pytest

from ga_reporting import PROPERTY_DEFS

SAMPLE_RESPONSE = {
    "reports": [
        {
            "columnHeader": {
                "dimensions": ["ga:pageTitle"],
                "metricHeader": {"metricHeaderEntries": [{"name": "ga:sessions", "type": "INTEGER"}]},
            },
            "data": {
                "rows": [
                    {"dimensions": ["Home"], "metrics": [{"values": ["42"]}]},
                    {"dimensions": ["Pricing"], "metrics": [{"values": ["7"]}]},
                ],
                "rowCount": 2,
            },
            "nextPageToken": "2",
        }
    ]
}


@pytest.fixture
def key_json():
    return json.dumps({
        "type": "service_account",
        "project_id": "demo-project",
        "client_email": "nifi@demo-project.iam.gserviceaccount.com",
        "token_uri": "https://oauth2.googleapis.com/token",
    })


@pytest.fixture
def properties(key_json):
    """Property values as NiFi would hand them over with defaults applied."""
    values = {p["name"]: p.get("default") for p in PROPERTY_DEFS}
    values["google_key_json"] = key_json
    values["view_id"] = "123456789"
    return values


@pytest.fixture
def service():
    """Discovery client double whose batchGet returns SAMPLE_RESPONSE."""
    svc = MagicMock()
    svc.reports.return_value.batchGet.return_value.execute.return_value = SAMPLE_RESPONSE
    return svc


# -- nifiapi stand-ins ---------------------------------------------------------
# nifiapi ships with the NiFi Python framework only, so the processor modules
# are imported against these minimal versions of the classes they use.


class _Result:

    def __init__(self, relationship, attributes=None, contents=None):
        self.relationship = relationship
        self.attributes = attributes
        self.contents = str.encode(contents) if isinstance(contents, str) else contents


class _Processor:
    logger = None

    def __init__(self, **kwargs):
        pass


class _PropertyDescriptor:

    def __init__(self, name, description, required=False, sensitive=False, display_name=None,
                 default_value=None, expression_language_scope=None, validators=None, **kwargs):
        self.name = name
        self.description = description
        self.required = required
        self.sensitive = sensitive
        self.displayName = display_name
        self.defaultValue = default_value
        self.expressionLanguageScope = expression_language_scope
        self.validators = validators or []


class _StandardValidators:
    NON_EMPTY_VALIDATOR = "NON_EMPTY_VALIDATOR"
    NON_NEGATIVE_INTEGER_VALIDATOR = "NON_NEGATIVE_INTEGER_VALIDATOR"


class _ExpressionLanguageScope:
    NONE = "NONE"
    ENVIRONMENT = "ENVIRONMENT"
    FLOWFILE_ATTRIBUTES = "FLOWFILE_ATTRIBUTES"


class _Relationship:

    def __init__(self, name, description, auto_terminated=False):
        self.name = name
        self.description = description
        self.auto_terminated = auto_terminated


def _module(name, **attrs):
    module = types.ModuleType(name)
    for k, v in attrs.items():
        setattr(module, k, v)
    return module


@pytest.fixture
def nifiapi(monkeypatch):
    """Registers the nifiapi stand-ins and drops cached processor modules."""
    modules = {
        "nifiapi": _module("nifiapi"),
        "nifiapi.flowfiletransform": _module(
            "nifiapi.flowfiletransform",
            FlowFileTransform=type("FlowFileTransform", (_Processor,), {}),
            FlowFileTransformResult=type("FlowFileTransformResult", (_Result,), {}),
        ),
        "nifiapi.flowfilesource": _module(
            "nifiapi.flowfilesource",
            FlowFileSource=type("FlowFileSource", (_Processor,), {}),
            FlowFileSourceResult=type("FlowFileSourceResult", (_Result,), {}),
        ),
        "nifiapi.properties": _module(
            "nifiapi.properties",
            PropertyDescriptor=_PropertyDescriptor,
            StandardValidators=_StandardValidators,
            ExpressionLanguageScope=_ExpressionLanguageScope,
        ),
        "nifiapi.relationship": _module("nifiapi.relationship", Relationship=_Relationship),
    }
    for name, module in modules.items():
        monkeypatch.setitem(sys.modules, name, module)
    for name in ("nifi_properties", "GetGoogleAnalyticsReport", "GenerateGoogleAnalyticsReport"):
        monkeypatch.delitem(sys.modules, name, raising=False)
    return modules


@pytest.fixture
def get_module(nifiapi):
    return importlib.import_module("GetGoogleAnalyticsReport")


@pytest.fixture
def generate_module(nifiapi):
    return importlib.import_module("GenerateGoogleAnalyticsReport")
