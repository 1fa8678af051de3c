import logging


def configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level.upper(), logging.INFO),
		format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
	)
	# httpx logs every request at INFO
	logging.getLogger("httpx").setLevel(logging.WARNING)
	logging.getLogger("azure").setLevel(logging.WARNING)
