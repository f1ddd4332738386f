import os

import click

from . import config, file_io, orchestrator, planner


@click.group()
def main():
    """Plan exposure brackets and fuse bracketed frames into one image."""


@main.command("plan")
@click.option(
    "--shots",
    "shot_count",
    type=click.IntRange(config.SHOT_COUNT_MIN, config.SHOT_COUNT_MAX),
    default=config.DEFAULT_SHOT_COUNT,
    show_default=True,
    help="Number of shots in the bracket. Odd counts include 0 EV.",
)
@click.option(
    "--ev-spacing",
    type=click.FloatRange(config.EV_SPACING_MIN, config.EV_SPACING_MAX),
    default=config.DEFAULT_EV_SPACING,
    show_default=True,
    help="EV distance between neighbouring shots.",
)
@click.option(
    "--range",
    "exposure_range",
    type=(int, int),
    default=config.DEFAULT_EXPOSURE_RANGE,
    show_default=True,
    help="Device exposure-compensation index range (lower upper).",
)
@click.option(
    "--step",
    type=float,
    default=config.DEFAULT_EXPOSURE_STEP,
    show_default=True,
    help="EV value of one exposure-compensation index on the device.",
)
def plan_command(shot_count, ev_spacing, exposure_range, step):
    """
    Prints the exposure-compensation indices to request from the device,
    one per line with the EV offset they correspond to.
    """
    device_range = planner.ExposureRange(*exposure_range)
    try:
        device_range.validate()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--range")

    if not planner.is_compensation_supported(device_range, step):
        click.echo("⚠️ Exposure compensation not supported; capture a single frame at index 0.")
        return

    plan = planner.plan_bracket(shot_count, ev_spacing, device_range, step)
    if not plan:
        click.echo("⚠️ No exposure index fits the device range.")
        return

    for index, ev in zip(plan, planner.plan_to_ev(plan, step)):
        click.echo(f"{index:+d}\t{ev:+.2f} EV")


@main.command("fuse")
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default=".",
    show_default=True,
    help="Output file, or a directory (batch output / timestamped file name).",
)
@click.option(
    "--strategy",
    default=config.DEFAULT_FUSION_STRATEGY,
    type=click.Choice(config.FUSION_STRATEGIES, case_sensitive=False),
    help="Fusion strategy: flat-alpha (default), well-exposedness.",
)
@click.option(
    "--jobs",
    type=int,
    default=config.DEFAULT_JOBS,
    help="Number of concurrent jobs for batch processing. Default is min(4, CPU count).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(['jpg', 'png', 'tif'], case_sensitive=False),
    default=config.DEFAULT_OUTPUT_FORMAT,
    help="Output file format when the output is a directory. Default is 'jpg'.",
)
@click.option(
    "--quality",
    type=click.IntRange(1, 100),
    default=config.FUSED_JPEG_QUALITY,
    help="JPEG quality of the fused image. Default is 100.",
)
@click.option(
    "--max-dimension",
    type=int,
    default=config.MAX_DECODE_DIMENSION,
    help="Subsample frames larger than this while decoding. 0 disables.",
)
@click.option(
    "--batch-id",
    default=None,
    help="Batch identifier for grouping batch output (HDR_<id>). Defaults to the current timestamp.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug messages.")
def fuse_command(inputs, output_path, strategy, jobs, output_format, quality, max_dimension, batch_id, verbose):
    """
    Fuses a bracket of differently exposed frames into one image.

    INPUTS: A bracket directory, a directory of bracket directories, or two or
    more image files ordered darkest first.
    """
    strategy = strategy.lower()
    output_format = output_format.lower()
    try:
        if len(inputs) == 1 and os.path.isdir(inputs[0]):
            orchestrator.process_path(
                input_path=inputs[0],
                output_path=output_path,
                strategy=strategy,
                jobs=jobs,
                logger_func=click.echo,
                output_format=output_format,
                max_dimension=max_dimension or None,
                quality=quality,
                verbose=verbose,
                batch_id=batch_id,
            )
        else:
            if os.path.isdir(output_path):
                output_path = os.path.join(
                    output_path, file_io.generate_output_filename(extension=output_format)
                )
            orchestrator.process_bracket(
                list(inputs),
                output_path,
                strategy=strategy,
                max_dimension=max_dimension or None,
                quality=quality,
                log_target=click.echo,
                verbose=verbose,
            )
    except Exception as e:
        # The orchestrator will log specifics, but we can catch fatal errors here.
        raise click.ClickException(f"A critical error occurred: {e}")


if __name__ == "__main__":
    main()
