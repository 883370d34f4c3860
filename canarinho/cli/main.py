"""Main entry point for the Canarinho CLI."""

import signal
import sys
from dataclasses import fields
from typing import Optional

import click

from ..logger import get_logger
from ..logging_config import setup_logging
from ..audio.feedback import BellFeedback
from ..audio.frames import AudioInputError
from ..core.config import ConfigManager, TunerConfig
from ..core.factory import ComponentFactory
from ..core.interfaces import IFrameSource
from ..ui.console import ConsoleDisplay

logger = get_logger(__name__)


def _build_factory(ctx: click.Context, **overrides) -> ComponentFactory:
    manager = ConfigManager(ctx.obj.get("config_dir"))
    try:
        config = manager.get_tuner_config().with_overrides(**overrides)
    except (ValueError, TypeError) as e:
        logger.error(f"Invalid tuner configuration: {e}")
        click.echo(f"Error: invalid tuner configuration: {e}", err=True)
        ctx.exit(1)
    return ComponentFactory(config_manager=manager, config=config)


def _run_session(
    factory: ComponentFactory,
    source: IFrameSource,
    duration: Optional[float],
    big: bool,
    realtime: bool = True,
) -> int:
    """Wire display and bell to a session and run it until done or interrupted."""
    config = factory.config
    display = ConsoleDisplay(use_flats=config.use_flats, big_note=big)
    feedback = BellFeedback(sample_rate=44100, enabled=config.bell)
    session = factory.create_tuner_session(source, display=display, feedback=feedback)

    def handle_sigterm(_signum, _frame):
        session.request_stop()

    previous = signal.signal(signal.SIGTERM, handle_sigterm)
    try:
        cycles = session.run(duration=duration, realtime=realtime)
    except AudioInputError as e:
        logger.error(f"Audio input failed: {e}")
        click.echo(f"Error: {e}", err=True)
        return 1
    except KeyboardInterrupt:
        click.echo("\nStopped.")
        return 0
    finally:
        signal.signal(signal.SIGTERM, previous)

    click.echo(
        f"Processed {cycles} frames, {feedback.play_count} in-tune confirmations."
    )
    return 0


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding tuner.json (default: ~/.config/canarinho)",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Canarinho - instrument tuner"""
    setup_logging("DEBUG" if debug else None)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


def tuning_options(func):
    """Options shared by the commands that run the tuner."""
    options = [
        click.option("--in-tune-cents", type=float, default=None, help="In-tune band in cents (default: 5)"),
        click.option("--silence-rms", type=float, default=None, help="RMS below which a frame is silent (default: 0.01)"),
        click.option("--trim-amplitude", type=float, default=None, help="Amplitude that marks trim points (default: 0.2)"),
        click.option("--frame-length", type=int, default=None, help="Samples per frame (default: 2048)"),
        click.option("--concert-pitch", type=float, default=None, help="Frequency of A4 in Hz (default: 440)"),
        click.option("--flats/--sharps", default=None, help="Spell notes with flats or sharps"),
        click.option("--bell/--no-bell", default=None, help="Play a bell when a string comes into tune"),
        click.option("--big", is_flag=True, help="Draw the note name in large letters"),
        click.option("--duration", "-t", type=float, default=None, help="Stop after this many seconds"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command()
@click.option("--device", type=int, default=None, help="Audio input device ID (default: system default)")
@click.option("--device-name", default=None, help="Pick the first input device whose name contains this text")
@click.option("--sample-rate", type=int, default=None, help="Preferred sample rate in Hz (default: 44100)")
@tuning_options
@click.pass_context
def listen(ctx, device, device_name, sample_rate, in_tune_cents, silence_rms,
           trim_amplitude, frame_length, concert_pitch, flats, bell, big, duration):
    """Tune from the microphone."""
    factory = _build_factory(
        ctx,
        in_tune_cents=in_tune_cents,
        silence_rms=silence_rms,
        trim_amplitude=trim_amplitude,
        frame_length=frame_length,
        concert_pitch=concert_pitch,
        sample_rate=sample_rate,
        use_flats=flats,
        bell=bell,
    )
    source = factory.create_frame_source("live", device_id=device, device_name=device_name)
    click.echo("Listening... press Ctrl+C to stop.")
    ctx.exit(_run_session(factory, source, duration, big))


@cli.command(name="file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--loop", is_flag=True, help="Restart the file when it ends")
@click.option("--gain", type=float, default=1.0, help="Gain applied to the samples")
@click.option("--realtime", is_flag=True, help="Stream the file at playback speed")
@tuning_options
@click.pass_context
def file_command(ctx, path, loop, gain, realtime, in_tune_cents, silence_rms,
                 trim_amplitude, frame_length, concert_pitch, flats, bell, big, duration):
    """Tune from a WAV file."""
    factory = _build_factory(
        ctx,
        in_tune_cents=in_tune_cents,
        silence_rms=silence_rms,
        trim_amplitude=trim_amplitude,
        frame_length=frame_length,
        concert_pitch=concert_pitch,
        use_flats=flats,
        bell=bell,
    )
    try:
        source = factory.create_frame_source(
            "wav", file_path=path, loop=loop, gain=gain, realtime=realtime
        )
    except AudioInputError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    ctx.exit(_run_session(factory, source, duration, big, realtime=realtime))


@cli.command()
def devices():
    """List audio input devices."""
    from ..audio.audio_input import list_input_devices

    found = list_input_devices()
    if not found:
        click.echo("No input devices found.")
        return
    for device_id, device in found:
        click.echo(
            f"{device_id}: {device['name']} "
            f"({device['max_input_channels']} in, {device['default_samplerate']:.0f} Hz)"
        )


@cli.group(name="config")
def config_group():
    """Show or change the saved tuner settings."""


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Print the saved settings."""
    manager = ConfigManager(ctx.obj.get("config_dir"))
    for key, value in manager.get_config("tuner").items():
        click.echo(f"{key} = {value}")


@config_group.command(name="set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key, value):
    """Save one setting, e.g. `config set concert_pitch 442`."""
    manager = ConfigManager(ctx.obj.get("config_dir"))
    field_types = {f.name: f.type for f in fields(TunerConfig)}
    if key not in field_types:
        click.echo(f"Error: unknown setting '{key}'", err=True)
        ctx.exit(1)

    param_type = {bool: click.BOOL, int: click.INT, float: click.FLOAT}[field_types[key]]
    try:
        parsed = param_type.convert(value, None, ctx)
        manager.get_tuner_config().with_overrides(**{key: parsed})
    except click.BadParameter as e:
        click.echo(f"Error: {e.format_message()}", err=True)
        ctx.exit(1)
    except (ValueError, TypeError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if not manager.update_config("tuner", {key: parsed}):
        ctx.exit(1)
    click.echo(f"{key} = {parsed}")


@config_group.command(name="reset")
@click.pass_context
def config_reset(ctx):
    """Restore the default settings."""
    manager = ConfigManager(ctx.obj.get("config_dir"))
    if not manager.reset_config("tuner"):
        ctx.exit(1)
    click.echo("Tuner settings reset to defaults.")


def main(args=None) -> int:
    """Console script entry point."""
    return cli.main(args=args, prog_name="canarinho", standalone_mode=True)


if __name__ == "__main__":
    sys.exit(main())
