"""
GenerateGoogleAnalyticsReport
=============================
Sama dengan GetGoogleAnalyticsReport tapi tanpa input: tiap trigger bikin
FlowFile baru berisi response JSON report. Cocok dipasang di awal flow
dengan schedule (misal CRON tiap pagi).

Expression Language hanya dievaluasi terhadap environment / parameter,
tidak ada attribute FlowFile.
"""

from nifiapi.flowfilesource import FlowFileSource, FlowFileSourceResult
from nifiapi.properties import ExpressionLanguageScope
from nifiapi.relationship import Relationship

from ga_reporting import PROPERTY_DEFS, ReportConfig, ReportError, fetch_report
from nifi_properties import get_property_descriptors, read_properties


class GenerateGoogleAnalyticsReport(FlowFileSource):

    class Java:
        implements = ['org.apache.nifi.python.processor.FlowFileSource']

    class ProcessorDetails:
        version = "1.0.0"
        description = "Generate a FlowFile holding a Google Analytics report for the configured view, dimensions, metrics and date range"
        tags = ["google", "analytics", "report", "source"]
        dependencies = ["google-api-python-client", "google-auth", "google-auth-httplib2"]

    REL_SUCCESS = Relationship(name="success", description="Report JSON fetched")

    def __init__(self, jvm=None, **kwargs):
        self.jvm = jvm
        super().__init__()
        self.descriptors = get_property_descriptors(PROPERTY_DEFS, ExpressionLanguageScope.ENVIRONMENT)

    def getRelationships(self):
        return {self.REL_SUCCESS}

    def getPropertyDescriptors(self):
        return self.descriptors

    def create(self, context):
        try:
            config = ReportConfig.from_properties(read_properties(context, PROPERTY_DEFS))
            report_json = fetch_report(config, logger=self.logger)
        except ReportError as e:
            self.logger.error(f"Failed to generate Google Analytics report: {e}")
            raise

        self.logger.info(f"Generated report view_id={config.view_id} ({config.start_date}..{config.end_date})")

        return FlowFileSourceResult(
            relationship="success",
            attributes=config.to_attributes(),
            contents=report_json
        )
