"""
Command Line Interface for generating and cleaning up thumbnails.
"""

import argparse
import logging
from typing import List, Optional

import urllib3
from botocore.exceptions import BotoCoreError, ClientError

from .config import FieldConfig, LocalConfig, S3Config, parse_permission
from .errors import ThumbsetError
from .image_field import ImageField
from .image_processor import ImageProcessor
from .local_storage import LocalStorage
from .paths import thumbnail_paths
from .s3_storage import S3Storage
from .thumbnail_set import ThumbnailSet
from .thumbnail_spec import parse_size
from .upload import UploadedAsset


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('thumbset')


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_bucket', None):
        config.bucket = args.s3_bucket
    if getattr(args, 's3_prefix', None):
        config.prefix = args.s3_prefix
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key

    return config


def get_field_config(args: argparse.Namespace) -> FieldConfig:
    """Get field configuration from environment and CLI overrides."""
    config = FieldConfig.from_env()

    if getattr(args, 'directory', None) is not None:
        config.default_directory = args.directory
    if getattr(args, 'permission', None):
        config.storage_permission = parse_permission(args.permission)
    if getattr(args, 'retain', False):
        config.retain = True

    return config


def get_storage(args: argparse.Namespace, logger: logging.Logger):
    """
    Get the storage backend selected by the arguments.

    --local-root selects the local filesystem, otherwise S3 is configured
    from the environment and --s3-* overrides.
    """
    local_root = getattr(args, 'local_root', None)

    if local_root:
        config = LocalConfig(root_path=local_root)
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(error)
            raise ValueError("Local configuration invalid")

        logger.info(f"Storage: Local filesystem ({config.root_path})")
        return LocalStorage(config, logger)

    config = get_s3_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("S3 configuration invalid")

    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    logger.info(f"Storage: S3 ({config.endpoint}, bucket {config.bucket})")
    return S3Storage(config, logger)


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--local-root', metavar='PATH',
                            help='Use local filesystem instead of S3')

    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-bucket', help='Override S3_BUCKET')
    s3_group.add_argument('--s3-prefix', help='Override S3_PREFIX')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')


def parse_call(text: str):
    """Parse ``NAME[:ARG,ARG...]`` into a name and numeric arguments."""
    name, _, rest = text.partition(':')
    args = []
    for raw in filter(None, rest.split(',')):
        number = float(raw)
        args.append(int(number) if number.is_integer() else number)
    return name, args


def cmd_generate(args: argparse.Namespace) -> int:
    """Execute generate command."""
    logger = setup_logging(args.verbose)

    try:
        storage = get_storage(args, logger)
        config = get_field_config(args)
        specs = [parse_size(text) for text in args.thumb or []]
        calls = [parse_call(text) for text in args.call or []]
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        field = ImageField(
            storage,
            config=config,
            processor=ImageProcessor(quality=args.quality, logger=logger),
            original=args.previous,
            max_workers=args.workers,
            logger=logger,
        )
        for spec in specs:
            field.thumbnail(spec.name, spec.width, spec.height, spec.action)
        for name, call_args in calls:
            field.call(name, *call_args)
        asset = UploadedAsset.from_path(args.image)
        target = field.upload(asset, name=args.name)
    except FileNotFoundError:
        logger.error(f"Image not found: {args.image}")
        return 1
    except (ThumbsetError, ValueError) as e:
        logger.error(f"Generation failed: {e}")
        return 1
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Storage error: {e}")
        return 1

    print(target)
    for path in thumbnail_paths(target, field.thumbnails.names):
        print(path)
    return 0


def cmd_destroy(args: argparse.Namespace) -> int:
    """Execute destroy command."""
    logger = setup_logging(args.verbose)

    try:
        storage = get_storage(args, logger)
        config = get_field_config(args)
        specs = [parse_size(text) for text in args.thumb or []]
    except ValueError as e:
        logger.error(str(e))
        return 1

    thumbnails = ThumbnailSet(storage, retain=config.retain, logger=logger)
    for spec in specs:
        thumbnails.register(spec.name, spec.width, spec.height, spec.action)

    try:
        deleted = thumbnails.destroy_all(args.original)
    except (ThumbsetError, ValueError) as e:
        logger.error(f"Cleanup failed: {e}")
        return 1
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Storage error: {e}")
        return 1

    logger.info(f"Deleted {deleted} thumbnails")
    return 0


def cmd_paths(args: argparse.Namespace) -> int:
    """Execute paths command: print derived thumbnail paths."""
    try:
        names = [parse_size(text).name for text in args.thumb or []]
    except ValueError as e:
        print(str(e))
        return 1

    for path in thumbnail_paths(args.original, names):
        print(path)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='thumbset',
        description='Generate and clean up named image thumbnails',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Thumbnails are given as NAME=WIDTHxHEIGHT[:ACTION], e.g. small=120x90 or
square=64x64:fit. Each is stored next to the original as <stem>-NAME.<ext>.

Examples:
  python -m thumbset generate photo.jpg --local-root /srv/media --thumb small=120x90
  python -m thumbset destroy --local-root /srv/media --original images/photo.jpg --thumb small=120x90
  python -m thumbset paths --original images/photo.jpg --thumb small=120x90
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    gen_parser = subparsers.add_parser('generate', help='Store an image and generate its thumbnails')
    gen_parser.add_argument('image', help='Image file to upload')
    gen_parser.add_argument('-t', '--thumb', action='append', help='Thumbnail NAME=WxH[:ACTION]')
    gen_parser.add_argument('-d', '--directory', help='Storage directory (default: THUMBSET_IMAGE_DIRECTORY)')
    gen_parser.add_argument('--name', help='Stored filename (default: the image filename)')
    gen_parser.add_argument('--previous', nargs='+', metavar='PATH',
                           help='Stored original(s) being replaced')
    gen_parser.add_argument('--retain', action='store_true', help='Keep previous files')
    gen_parser.add_argument('--permission', help='Octal permission bits for written files, e.g. 0644')
    gen_parser.add_argument('--call', action='append', metavar='NAME[:ARGS]',
                           help='Operation to apply to the stored original, e.g. rotate:90')
    gen_parser.add_argument('-q', '--quality', type=int, default=85, help='JPEG quality (default: 85)')
    gen_parser.add_argument('-w', '--workers', type=int, default=1, help='Thumbnails generated in parallel')
    gen_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(gen_parser)

    destroy_parser = subparsers.add_parser('destroy', help='Delete the thumbnails of stored originals')
    destroy_parser.add_argument('-o', '--original', nargs='+', required=True, metavar='PATH',
                               help='Stored original(s)')
    destroy_parser.add_argument('-t', '--thumb', action='append', help='Thumbnail NAME=WxH[:ACTION]')
    destroy_parser.add_argument('--retain', action='store_true', help='Keep files (no-op, also THUMBSET_RETAIN)')
    destroy_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_storage_arguments(destroy_parser)

    paths_parser = subparsers.add_parser('paths', help='Print derived thumbnail paths')
    paths_parser.add_argument('-o', '--original', nargs='+', required=True, metavar='PATH',
                             help='Stored original(s)')
    paths_parser.add_argument('-t', '--thumb', action='append', help='Thumbnail NAME=WxH[:ACTION]')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'generate':
        return cmd_generate(parsed_args)
    elif parsed_args.command == 'destroy':
        return cmd_destroy(parsed_args)
    elif parsed_args.command == 'paths':
        return cmd_paths(parsed_args)

    return 1
