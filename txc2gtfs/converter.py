import os
import logging
from concurrent.futures import ProcessPoolExecutor

from txc2gtfs.generate_outputs.output_gtfs import create_gtfs_tables, create_outputs
from txc2gtfs.helper.exceptions import TransXChangeError
from txc2gtfs.process_txc.read_reference import import_bank_holidays, import_stops
from txc2gtfs.process_txc.read_txc import list_xml_files, process_xml_file
from txc2gtfs.process_txc.transform import transform_document

logger = logging.getLogger(__name__)


def get_document_id(file_path, input_dir):
    relative = os.path.relpath(file_path, input_dir)
    return os.path.splitext(relative)[0].replace(os.sep, '_')


def convert_file(file_path, document_id, holidays):
    document = process_xml_file(file_path)
    schedule, journeys = transform_document(document, holidays=holidays, document_id=document_id)
    return {'document_id': document_id, 'schedule': schedule, 'journeys': journeys}


def convert_files(input_dir, holidays=None, workers=1):
    """Converts every TransXChange file below input_dir, skipping (and logging) documents that fail."""
    holidays = holidays or {}
    jobs = [(path, get_document_id(path, input_dir)) for path in list_xml_files(input_dir)]
    results = []

    if workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [(path, executor.submit(convert_file, path, document_id, holidays)) for path, document_id in jobs]
            for path, future in futures:
                try:
                    results.append(future.result())
                except TransXChangeError as e:
                    logger.error(f"Skipping {path}: {type(e).__name__}: {e}")
    else:
        for path, document_id in jobs:
            logger.info(f"Processing {path}...")
            try:
                results.append(convert_file(path, document_id, holidays))
            except TransXChangeError as e:
                logger.error(f"Skipping {path}: {type(e).__name__}: {e}")

    logger.info(f"Converted {len(results)} of {len(jobs)} document(s)")
    return results


def run_conversion(input_dir: str, output_dir: str, naptan_path=None, holidays_path=None, workers=1) -> list[str]:
    naptan = import_stops(naptan_path) if naptan_path else {}
    holidays = import_bank_holidays(holidays_path) if holidays_path else {}

    results = convert_files(input_dir, holidays=holidays, workers=workers)
    gtfs_tables = create_gtfs_tables(results, naptan)
    return create_outputs(gtfs_tables, output_dir)


# For local runs
if __name__ == '__main__':
    from txc2gtfs.helper.utils import get_holidays_path, get_input_dir, get_naptan_path, get_output_dir

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    output_dir = get_output_dir()
    os.makedirs(output_dir, exist_ok=True)
    run_conversion(get_input_dir(), output_dir, naptan_path=get_naptan_path(), holidays_path=get_holidays_path(),
                   workers=os.cpu_count() or 1)
