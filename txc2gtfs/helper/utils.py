import os


def running_in_lambda():
    return os.environ.get("AWS_EXECUTION_ENV", "").startswith("AWS_Lambda")


def get_output_dir():
    # Check if running inside AWS Lambda
    if running_in_lambda():
        return "/tmp/output"
    else:
        return os.path.join(os.getcwd(), "output")


def get_input_dir():
    # If running inside Lambda, use /tmp
    if running_in_lambda():
        return "/tmp/InputFiles/txc"
    else:
        return os.path.join(os.getcwd(), "InputFiles", "txc")


def get_naptan_path():
    return os.environ.get("TXC2GTFS_NAPTAN_PATH") or None


def get_holidays_path():
    return os.environ.get("TXC2GTFS_HOLIDAYS_PATH") or None


def get_output_bucket():
    return os.environ.get("TXC2GTFS_OUTPUT_BUCKET", "txc2gtfs-output")
