"""
GetGoogleAnalyticsReport
========================
Ambil report Google Analytics (Reporting API v4) berdasarkan view id,
dimensions, metrics dan date range. Response JSON jadi content FlowFile.

Semua property (kecuali Google Key JSON) support Expression Language,
dievaluasi terhadap attribute FlowFile yang masuk.

Output attributes:
  - mime.type = application/json
  - application_name, start_date, end_date, view_id
  - dimensions, metrics
  - page_size, page_token
  - order_by_dsc, order_by_asc

Error (key invalid, gagal build client, API error) -> ReportError, di-log lalu
di-raise lagi supaya NiFi rollback session.
"""

from nifiapi.flowfiletransform import FlowFileTransform, FlowFileTransformResult
from nifiapi.properties import ExpressionLanguageScope
from nifiapi.relationship import Relationship

from ga_reporting import PROPERTY_DEFS, ReportConfig, ReportError, fetch_report
from nifi_properties import get_property_descriptors, read_properties


class GetGoogleAnalyticsReport(FlowFileTransform):

    class Java:
        implements = ['org.apache.nifi.python.processor.FlowFileTransform']

    class ProcessorDetails:
        version = "1.0.0"
        description = "Get a Google Analytics report by view id, dimensions, metrics and date range"
        tags = ["google", "analytics", "report"]
        dependencies = ["google-api-python-client", "google-auth", "google-auth-httplib2"]

    REL_SUCCESS = Relationship(name="success", description="Report JSON fetched")

    def __init__(self, jvm=None, **kwargs):
        self.jvm = jvm
        super().__init__()
        self.descriptors = get_property_descriptors(
            PROPERTY_DEFS, ExpressionLanguageScope.FLOWFILE_ATTRIBUTES
        )

    def getRelationships(self):
        return {self.REL_SUCCESS}

    def getPropertyDescriptors(self):
        return self.descriptors

    def transform(self, context, flowfile):
        attrs = dict(flowfile.getAttributes() or {})

        try:
            config = ReportConfig.from_properties(read_properties(context, PROPERTY_DEFS, flowfile))
            report_json = fetch_report(config, logger=self.logger)
        except ReportError as e:
            self.logger.error(f"Failed to get Google Analytics report: {e}")
            raise

        out_attrs = attrs.copy()
        out_attrs.update(config.to_attributes())

        self.logger.info(
            f"Fetched report view_id={config.view_id} "
            f"({config.start_date}..{config.end_date}), {len(report_json)} chars"
        )

        return FlowFileTransformResult(
            relationship="success",
            contents=report_json,
            attributes=out_attrs
        )
