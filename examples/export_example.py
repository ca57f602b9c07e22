import time

from opentelemetry._logs import LogRecord, SeverityNumber

from lmlogs import LMLogRecordExporter, LMLogsConfig, configure_logs_export

# Ships a few log lines to the log-ingest API of the portal named in
# LM_LOGS_URL, authenticating with LM_LOGS_BEARER_TOKEN or the
# LM_LOGS_ACCESS_ID / LM_LOGS_ACCESS_KEY pair.


def main():
    exporter = LMLogRecordExporter(LMLogsConfig.from_env())
    provider = configure_logs_export(
        exporter,
        service_name="export-example",
        resource_attributes={"hostname": "host-01"},
    )
    logger = provider.get_logger("export-example")

    for i in range(5):
        logger.emit(
            LogRecord(
                timestamp=time.time_ns(),
                body=f"Hello {i}",
                severity_text="INFO",
                severity_number=SeverityNumber.INFO,
                attributes={"iteration": i},
            )
        )

    # flushes the batch processor, then waits for in-flight deliveries
    provider.shutdown()


if __name__ == "__main__":
    main()
