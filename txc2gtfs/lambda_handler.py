import os
import shutil
import logging
import zipfile

import boto3

from txc2gtfs.converter import run_conversion
from txc2gtfs.helper.utils import get_holidays_path, get_naptan_path, get_output_bucket

logger = logging.getLogger()
logger.setLevel(logging.INFO)

ARCHIVE_PATH = "/tmp/upload.zip"
EXTRACT_DIR = "/tmp/extracted"
GTFS_DIR = "/tmp/processed"

_s3_client = None


def get_s3_client():
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client('s3')
    return _s3_client


def get_uploaded_object(event):
    """(bucket, key) of the object that triggered the event, or (None, '') when there is none."""
    record = (event or {}).get('Records', [{}])[0]
    s3 = record.get('s3', {})
    return s3.get('bucket', {}).get('name'), s3.get('object', {}).get('key', "")


def reset_dirs(*dirs):
    for d in dirs:
        shutil.rmtree(d, ignore_errors=True)
        os.makedirs(d)


def fetch_feed(s3_client, bucket, key):
    s3_client.download_file(bucket, key, ARCHIVE_PATH)
    with zipfile.ZipFile(ARCHIVE_PATH, 'r') as archive:
        archive.extractall(EXTRACT_DIR)
    logger.info(f"Fetched and extracted s3://{bucket}/{key}")


def publish_feed(s3_client, paths, feed_name):
    bucket = get_output_bucket()
    for path in paths:
        key = f"gtfs/{feed_name}/{os.path.basename(path)}"
        s3_client.upload_file(path, bucket, key)
        logger.info(f"Uploaded {key} to {bucket}")


def lambda_handler(event=None, context=None):
    bucket, key = get_uploaded_object(event)

    if not bucket or not key.lower().endswith('.zip'):
        logger.warning(f"Ignoring event for {key!r}, expected a zip upload")
        return {'statusCode': 400, 'body': f"Skipped: {key} is not a zip file or event is malformed."}

    feed_name = os.path.splitext(os.path.basename(key))[0]
    reset_dirs(EXTRACT_DIR, GTFS_DIR)
    s3_client = get_s3_client()

    try:
        fetch_feed(s3_client, bucket, key)
        paths = run_conversion(EXTRACT_DIR, GTFS_DIR, naptan_path=get_naptan_path(),
                               holidays_path=get_holidays_path())
        publish_feed(s3_client, paths, feed_name)
    except Exception as e:
        logger.exception(f"Converting {key} failed")
        return {'statusCode': 500, 'body': f"Processing failed: {e}"}
    finally:
        shutil.rmtree(EXTRACT_DIR, ignore_errors=True)
        shutil.rmtree(GTFS_DIR, ignore_errors=True)

    return {'statusCode': 200, 'body': f"Converted {key} into {len(paths)} GTFS file(s)."}
