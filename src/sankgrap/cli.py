import argparse
import logging
import sys

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from .config import logger, load_settings, DEFAULT_TIMEOUT, DEFAULT_WORKERS
from .errors import SankgrapError, ConfigurationError
from .extractor import Mode
from .grabber import WorkerPool
from .matcher import SubdomainMatcher
from .utils.io_utils import read_urls, write_results


def build_parser():
    parser = argparse.ArgumentParser(prog="sankgrap",
                                     description="Extract subdomains of a target domain from live HTTP responses.",
                                     formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument("-d", "--domain", help="Domain to filter subdomains (e.g., example.com). Required.")
    parser.add_argument("-f", "--file", help="File containing URLs to process, one per line. Required.")
    parser.add_argument("-o", "--output", help="File to save extracted subdomains (default: stdout).")
    parser.add_argument("-w", "--workers", type=int,
                        help=f"Number of concurrent workers (default: $SANKGRAP_WORKERS or {DEFAULT_WORKERS}).")
    parser.add_argument("-m", "--mode", default=Mode.BOTH.value,
                        help="Mode: 'rb' (response body), 'rh' (response header), or 'both' (default).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging (per-URL debug messages).")
    parser.add_argument("--timeout", type=float,
                        help=f"Request timeout in seconds, fractions allowed (default: $SANKGRAP_TIMEOUT or {DEFAULT_TIMEOUT}).")
    parser.add_argument("--ignore-case", action="store_true", help="Match the domain case-insensitively.")
    parser.add_argument("--only-ok", action="store_true", help="Only scan responses with HTTP status 200.")
    parser.add_argument("--user-agent", help="User-Agent header sent with every request (default: $SANKGRAP_USER_AGENT or a desktop Chrome UA).")
    parser.add_argument("--no-progress", action="store_false", dest="progress", default=True,
                        help="Disable the progress bar.")
    return parser


def validate_args(args):
    if not args.domain or not args.domain.strip():
        raise ConfigurationError("Domain (-d) is required")
    if not args.file:
        raise ConfigurationError("URL file (-f) is required")
    if args.workers < 1:
        raise ConfigurationError(f"Workers (-w) must be at least 1, got {args.workers}")
    if not args.timeout > 0:
        raise ConfigurationError(f"Timeout must be positive, got {args.timeout}")
    return Mode.parse(args.mode)


def run_pool(pool, urls, show_progress):
    if not show_progress:
        return pool.run(urls)
    with logging_redirect_tqdm():
        with tqdm(total=len(urls), unit="url", file=sys.stderr, dynamic_ncols=True) as bar:
            pool.progress_callback = bar.update
            return pool.run(urls)


def main(argv=None):
    try:
        args = build_parser().parse_args(argv)
        settings = load_settings(workers=args.workers, timeout=args.timeout, user_agent=args.user_agent)
        args.workers, args.timeout, args.user_agent = settings['workers'], settings['timeout'], settings['user_agent']

        logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

        mode = validate_args(args)
        matcher = SubdomainMatcher(args.domain, ignore_case=args.ignore_case)
        pool = WorkerPool(matcher, concurrency=args.workers, mode=mode, timeout=args.timeout,
                          only_ok=args.only_ok, user_agent=args.user_agent)

        urls = read_urls(args.file)
        results = run_pool(pool, urls, args.progress)
        write_results(results, args.output)
    except SankgrapError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted.")
        return 130
    except Exception as e:
        logger.critical(f"An unhandled error occurred during extraction: {e}", exc_info=True)
        return 1

    print("Extraction complete.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
