import argparse
import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone

from tqdm import tqdm

from twitch_recover import __version__
from twitch_recover.errors import TwitchRecoverError
from twitch_recover.playlist import parse_streamer_and_vod_id_from_m3u8_link, return_supported_qualities, unmute_vod
from twitch_recover.recover import bulk_recover, recover_from_url, recover_manual
from twitch_recover.settings import get_default_directory, get_use_progress_bar


GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


def print_success(message):
    print(f"{GREEN}✓ {message}{RESET}")


def print_error(message):
    print(f"{RED}✖  {message}{RESET}")


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be positive")
    return number


@contextmanager
def search_progress(desc="Searching"):
    if not get_use_progress_bar():
        yield None
        return

    with tqdm(total=0, desc=desc, unit="url", leave=False, colour="blue") as pbar:
        def update(done, total):
            pbar.total = total
            pbar.update(done - pbar.n)

        yield update


def print_qualities(m3u8_link):
    print("Checking for available qualities...")
    qualities = return_supported_qualities(m3u8_link)
    if not qualities:
        print("No rendition answered.")
        return
    for idx, resolution in enumerate(qualities, 1):
        label = "Source (Best Quality)" if resolution == "chunked" else resolution
        print(f"{idx}. {label}")


def handle_found(url, args):
    print_success(f"Found URL: {url}")
    if args.qualities:
        print_qualities(url)


def print_record(record, duration):
    stream_datetime = datetime.fromtimestamp(record.start_time, timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    print(f"\nDatetime: {stream_datetime}")
    if duration is not None:
        print(f"Duration: {duration // 60}h {duration % 60}m")


def link_command(args):
    print(f"Checking {args.link}")
    with search_progress() as on_batch:
        url = recover_from_url(args.link, batch_size=args.batch_size, window=args.window, on_batch=on_batch, on_record=print_record)
    handle_found(url, args)
    return 0


def manual_command(args):
    streamer = args.streamer.lower().strip()
    print(f"Recovering VOD for {streamer} with ID {args.vod_id}")
    with search_progress() as on_batch:
        url = recover_manual(streamer, args.vod_id, args.datetime, batch_size=args.batch_size, window=args.window, on_batch=on_batch)
    handle_found(url, args)
    return 0


def bulk_command(args):
    progress = tqdm(desc="Recovering", unit="vod", disable=not get_use_progress_bar())

    def on_result(result):
        progress.update(1)
        if result.url:
            tqdm.write(f"{GREEN}✓ {result.link}: {result.url}{RESET}")
        else:
            tqdm.write(f"{RED}✖  {result.link}: {result.error}{RESET}")

    with progress:
        results = bulk_recover(args.links, max_links=args.max_links, batch_size=args.batch_size, window=args.window, on_result=on_result)

    found = [result for result in results if result.url]
    print(f"\nRecovered {len(found)} of {len(results)} VODs")
    if args.qualities:
        for result in found:
            print(f"\n{result.link}")
            print_qualities(result.url)
    return 0 if len(found) == len(results) else 1


def unmute_command(args):
    is_muted, playlist = unmute_vod(args.m3u8)
    output_path = args.output
    if output_path is None:
        streamer, vod_id = parse_streamer_and_vod_id_from_m3u8_link(args.m3u8)
        filename = f"{streamer}_{vod_id}.m3u8" if streamer else "unmuted.m3u8"
        output_path = os.path.join(get_default_directory(), filename)

    with open(output_path, "w", encoding="utf-8") as m3u8_file:
        m3u8_file.write(playlist)

    if is_muted:
        print_success(f"{os.path.normpath(output_path)} has been processed!")
    else:
        print(f"Video is not muted! Playlist saved to {os.path.normpath(output_path)}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="twitch-recover", description="Recover the playback URL of unlisted Twitch VODs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    search = argparse.ArgumentParser(add_help=False)
    search.add_argument("--batch-size", type=positive_int, default=None, help="Concurrent probes per batch (default: number of CDN domains)")
    search.add_argument("--window", type=positive_int, default=None, help="Seconds after the tracked start time to search (default: 60)")
    search.add_argument("--qualities", action="store_true", help="List the renditions available for a found VOD")

    subparsers = parser.add_subparsers(dest="command", required=True)

    link = subparsers.add_parser("link", parents=[search], help="Recover a VOD from a TwitchTracker URL")
    link.add_argument("link")
    link.set_defaults(func=link_command)

    bulk = subparsers.add_parser("bulk", parents=[search], help="Recover VODs from several TwitchTracker URLs")
    bulk.add_argument("links", nargs="+")
    bulk.add_argument("--max-links", type=positive_int, default=None, help="Maximum number of links to recover")
    bulk.set_defaults(func=bulk_command)

    manual = subparsers.add_parser("manual", parents=[search], help="Recover a VOD from streamer, VOD ID and start time")
    manual.add_argument("streamer")
    manual.add_argument("vod_id")
    manual.add_argument("datetime", help="Stream start, YYYY-MM-DD HH:MM:SS (24-hour format, UTC)")
    manual.set_defaults(func=manual_command)

    unmute = subparsers.add_parser("unmute", help="Rewrite a recovered playlist so muted segments play")
    unmute.add_argument("m3u8")
    unmute.add_argument("-o", "--output", default=None, help="Output file (default: DEFAULT_DIRECTORY/<streamer>_<vod_id>.m3u8)")
    unmute.set_defaults(func=unmute_command)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.getLogger("asyncio").setLevel(logging.CRITICAL)
    logging.getLogger("aiohttp").setLevel(logging.CRITICAL)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        return args.func(args)
    except TwitchRecoverError as e:
        print()
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\n\nExiting...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
