import sys

from ..config import logger
from ..errors import SourceReadError, SinkWriteError


def read_urls(path):
    """Reads one URL per line, trimming whitespace and skipping blank lines."""
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return [line.strip() for line in f if line.strip()]
    except OSError as e:
        raise SourceReadError(f"Failed to read URLs from {path}: {e}") from e


def write_results(results, output_file=None, stream=None):
    lines = sorted(results)
    if not output_file:
        stream = stream or sys.stdout
        for subdomain in lines:
            stream.write(subdomain + '\n')
        stream.flush()
        return len(lines)

    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            for subdomain in lines:
                f.write(subdomain + '\n')
    except OSError as e:
        # Last chance to see the results before they are lost
        logger.error(f" [!] Could not write results to {output_file}: {e}. Dumping {len(lines)} matches to the log.")
        for subdomain in lines:
            logger.warning(f" [+] {subdomain}")
        raise SinkWriteError(f"Failed to write results to {output_file}: {e}") from e
    logger.info(f"[*] Wrote {len(lines)} subdomains to {output_file}")
    return len(lines)
