import os
import concurrent.futures
import multiprocessing
from typing import List, Optional

from . import config, engine, file_io
from .logger import create_logger


def collect_bracket(directory: str) -> List[str]:
    """Return the supported image files of one bracket directory, in name order."""
    names = sorted(
        f for f in os.listdir(directory)
        if os.path.splitext(f)[1].lower() in config.SUPPORTED_IMAGE_EXTENSIONS
        and os.path.isfile(os.path.join(directory, f))
    )
    return [os.path.join(directory, f) for f in names]


def process_bracket(
    input_paths: List[str],
    output_path: str,
    strategy: str = config.DEFAULT_FUSION_STRATEGY,
    max_dimension: Optional[int] = config.MAX_DECODE_DIMENSION,
    quality: int = config.FUSED_JPEG_QUALITY,
    log_target: Optional[object] = None,
    session_id: Optional[str] = None,
    verbose: bool = False,
) -> str:
    """
    Load, fuse and save one bracket. Frames are fused in the given order,
    darkest first. Runs inside worker processes in batch mode, where
    log_target is the shared queue (or None to print).
    """
    logger = create_logger(log_target, session_id, verbose)
    logger.info(f"🔍 Found {len(input_paths)} frames")

    fused = engine.fuse_files(input_paths, strategy=strategy, max_dimension=max_dimension, logger=logger)
    try:
        return file_io.save_image(fused, output_path, logger, quality=quality)
    finally:
        del fused


def process_path(
    input_path,
    output_path,
    strategy,
    jobs,
    logger_func, # A function to handle logging, e.g., click.echo or queue.put
    output_format: str = config.DEFAULT_OUTPUT_FORMAT,
    max_dimension: Optional[int] = config.MAX_DECODE_DIMENSION,
    quality: int = config.FUSED_JPEG_QUALITY,
    verbose: bool = False,
    batch_id: Optional[str] = None,
):
    """
    Fuses a single bracket directory, or every bracket sub-directory of a
    batch directory. Batch results are grouped under
    OUTPUT_PATH/HDR_<batch_id>/ (a new timestamp id unless one is given).
    Returns the list of written files.
    """

    def log_message(msg):
        if hasattr(logger_func, 'put'):
            logger_func.put(msg)
        else:
            logger_func(msg)

    def send_signal(data):
        """Progress signal for queue consumers."""
        if hasattr(logger_func, 'put'):
            logger_func.put(data)

    output_ext = f".{output_format}"
    log_queue = logger_func if hasattr(logger_func, 'put') else None

    frame_paths = collect_bracket(input_path)

    # ============================
    #      Batch Processing
    # ============================
    if not frame_paths:
        brackets = sorted(
            d for d in os.listdir(input_path)
            if os.path.isdir(os.path.join(input_path, d))
            and collect_bracket(os.path.join(input_path, d))
        )
        if not brackets:
            log_message("⚠️ No supported images or bracket folders found in the input directory.")
            raise ValueError("No brackets found.")

        if os.path.exists(output_path) and not os.path.isdir(output_path):
            error_msg = "For batch processing, the output path must be a directory."
            log_message(f"❌ Error: {error_msg}")
            raise ValueError(error_msg)
        batch_dir = file_io.batch_directory(output_path, batch_id or file_io.new_batch_id())

        count = len(brackets)
        log_message(f"🔍 Found {count} brackets for parallel processing.")
        send_signal({'total_brackets': count})

        written = []
        with concurrent.futures.ProcessPoolExecutor(
            max_workers=max(1, min(jobs, count)),
            # numba thread pools must not be inherited through fork
            mp_context=multiprocessing.get_context("spawn"),
        ) as executor:
            futures = {
                executor.submit(
                    process_bracket,
                    input_paths=collect_bracket(os.path.join(input_path, name)),
                    output_path=os.path.join(batch_dir, f"{name}{output_ext}"),
                    strategy=strategy,
                    max_dimension=max_dimension,
                    quality=quality,
                    log_target=log_queue,
                    session_id=name,
                    verbose=verbose,
                ): name for name in brackets
            }

            for future in concurrent.futures.as_completed(futures):
                name = futures[future]
                try:
                    written.append(future.result())
                except Exception as exc:
                    log_msg = f"❌ Generated an exception: {exc}"
                    if log_queue is not None:
                        log_queue.put({'id': name, 'msg': log_msg, 'level': 'ERROR'})
                    else:
                        log_message(f"[{name}] {log_msg}")
                finally:
                    send_signal({'status': 'done'})

        log_message(f"\n🎉 Batch fusion complete ({len(written)}/{count} brackets) in {batch_dir}.")
        return sorted(written)

    # ============================
    #    Single Bracket Processing
    # ============================
    final_output_path = output_path
    if os.path.isdir(output_path):
        final_output_path = os.path.join(
            output_path, file_io.generate_output_filename(extension=output_format)
        )

    send_signal({'total_brackets': 1})

    log_message("⚙️ Fusing single bracket...")
    try:
        written = process_bracket(
            frame_paths,
            final_output_path,
            strategy=strategy,
            max_dimension=max_dimension,
            quality=quality,
            log_target=logger_func,
            session_id=os.path.basename(os.path.normpath(input_path)),
            verbose=verbose,
        )
    finally:
        send_signal({'status': 'done'})

    log_message("\n🎉 Single bracket fusion complete.")
    return [written]
