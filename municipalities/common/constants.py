"""Application constants."""

STAGES = ("export-abolished",)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
EXPORT_CONFIG_FILENAME = "export.yml"
CADASTRAL_CSV_DELIMITER = ","
EXPORT_ERROR_MESSAGE = "Error while exporting abolished municipalities"
