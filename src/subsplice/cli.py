import argparse
import sys
import time

from .config import (ALIVE_POLICIES, ALIVE_ANY_RESPONSE, DEFAULT_OUTPUT, DEFAULT_WORKERS, SHORT_DOMAIN_POLICIES,
                     SHORT_DOMAIN_SKIP, ConfigError, RunConfig, parse_duration, require_inputs, setup_logging)
from .enumerator import SubdomainSplicer
from .phases.generation import expand
from .utils.input_utils import load_domains, read_lines
from .utils.output_utils import write_results
from .utils.progress import format_duration


def build_parser():
    parser = argparse.ArgumentParser(prog="subsplice",
                                     description="Subdomain splicer: inserts wordlist entries between the labels of a domain "
                                                 "and keeps the candidates that resolve and answer over HTTP(S).",
                                     formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument("-d", "--domain", help="Target domain (e.g., api.prod.example.com)")
    parser.add_argument("-df", "--domains-file", help="File with target domains, one per line.")
    parser.add_argument("-w", "--wordlist", required=True, help="Wordlist used to build subdomain combinations.")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help=f"Output file for alive subdomains (default: {DEFAULT_OUTPUT}).")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help=f"Number of concurrent workers (default: {DEFAULT_WORKERS}).")
    parser.add_argument("--timeout", default="3s", help="Timeout for HTTP requests (e.g., 5s, 500ms). Default: 3s.")
    parser.add_argument("--debug", action="store_true", help="Only print the generated combinations, do not check them.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging (display debug messages).")
    parser.add_argument("--log-file", help="Also write debug-level logs to this file.")
    parser.add_argument("--resolver", action="append", dest="resolvers", default=[],
                        help="DNS server to query instead of the system ones (repeatable).")
    parser.add_argument("--alive-policy", choices=ALIVE_POLICIES, default=ALIVE_ANY_RESPONSE,
                        help="'any': any HTTP response counts as alive (default).\n"
                             "'below-400': only responses with status < 400 count.")
    parser.add_argument("--short-domain-policy", choices=SHORT_DOMAIN_POLICIES, default=SHORT_DOMAIN_SKIP,
                        help="Domains with fewer than 3 labels: 'skip' them (default) or 'prepend' each word once.")
    parser.add_argument("--no-progress", action="store_false", dest="show_progress", default=True,
                        help="Disable the progress line.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.domain and not args.domains_file:
        parser.error("You must provide a domain (-d) or a domains file (-df)")

    try:
        config = RunConfig(
            workers=args.workers,
            timeout=parse_duration(args.timeout),
            debug=args.debug,
            nameservers=args.resolvers,
            alive_policy=args.alive_policy,
            short_domain_policy=args.short_domain_policy,
            show_progress=args.show_progress,
        ).validate()
    except ConfigError as e:
        parser.error(str(e))

    try:
        logger = setup_logging(verbose=args.verbose, log_file=args.log_file)
    except OSError as e:
        parser.error(f"Could not open log file {args.log_file}: {e}")

    try:
        words = read_lines(args.wordlist)
        domains = load_domains(args.domain, args.domains_file)
    except OSError as e:
        logger.critical(f" [!] Error reading input: {e}")
        return 1

    try:
        require_inputs(words, domains, args.wordlist)
    except ConfigError as e:
        parser.error(str(e))

    if args.debug:
        total = 0
        for candidate in expand(domains, words, config.short_domain_policy):
            print(f"[DEBUG] Generated: {candidate.hostname}")
            total += 1
        logger.info(f"[*] Generated {total} subdomains (debug mode, exiting)")
        return 0

    splicer = SubdomainSplicer(domains, words, config=config, logger=logger)
    start = time.monotonic()
    try:
        alive = splicer.run()
    except KeyboardInterrupt:
        logger.warning(" [!] Interrupted, results were not saved.")
        return 130
    elapsed = time.monotonic() - start

    try:
        write_results(args.output, alive)
    except OSError as e:
        logger.critical(f" [!] Error writing results to {args.output}: {e}")
        return 1

    logger.info(f"[*] Found {len(alive)} alive subdomains in {format_duration(elapsed)}")
    logger.info(f"[*] Results saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
