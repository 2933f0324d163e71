"""Command-line interface for pitch-to-midi.

Provides commands for:
- convert: Convert saved model output matrices to MIDI
- info: Show model output information
"""

import typer
from pathlib import Path
from typing import Optional, List
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="pitch-to-midi",
    help="Convert pitch model activations to notes and MIDI",
    rich_markup_mode="markdown",
)
console = Console()


def _load_model_output(input_file: Path):
    from .core import ModelOutput

    try:
        return ModelOutput.load(input_file)
    except FileNotFoundError:
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: Invalid model output: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def convert(
    input_file: Path = typer.Argument(
        ..., help="Model output .npz with onset, note and contour arrays"
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output MIDI file path"
    ),
    onset_threshold: float = typer.Option(
        0.5, "--onset-threshold", min=0.05, max=0.95, clamp=True,
        help="Onset activation needed to start a note (0.05-0.95)",
    ),
    frame_threshold: float = typer.Option(
        0.3, "--frame-threshold", min=0.05, max=0.95, clamp=True,
        help="Frame activation needed to sustain a note (0.05-0.95)",
    ),
    min_note_length: int = typer.Option(
        11, "--min-note-length", min=3, max=50, clamp=True,
        help="Notes must span more than this many frames (3-50)",
    ),
    energy_threshold: int = typer.Option(
        11, "--energy-threshold", min=1,
        help="Consecutive weak frames that end a note",
    ),
    min_freq: Optional[float] = typer.Option(
        None, "--min-freq", min=0, max=2000, clamp=True,
        help="Lowest pitch to keep, in Hz (0-2000)",
    ),
    max_freq: Optional[float] = typer.Option(
        None, "--max-freq", min=40, max=3000, clamp=True,
        help="Highest pitch to keep, in Hz (40-3000)",
    ),
    infer_onsets: bool = typer.Option(
        True, "--infer-onsets/--no-infer-onsets", help="Infer extra onsets from frame activations"
    ),
    pitch_bend: bool = typer.Option(
        False, "--pitch-bend/--no-pitch-bend", help="Estimate per-note pitch bends"
    ),
    melodia: bool = typer.Option(
        True, "--melodia/--no-melodia", help="Recover notes from leftover energy"
    ),
    tempo: int = typer.Option(
        120, "-t", "--tempo", min=1, help="MIDI tempo (BPM)"
    ),
    program: int = typer.Option(
        4, "--program", min=0, max=127, help="MIDI program number"
    ),
    multi_track: bool = typer.Option(
        False, "--multi-track/--single-track",
        help="One track per pitch (keeps overlapping pitch bends)",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose", help="Verbose output"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
):
    """Convert model output matrices to a MIDI file.

    **Examples:**

        pitch-to-midi convert song.npz

        pitch-to-midi convert song.npz -o song.mid --pitch-bend --multi-track
    """
    from .transcription import NotesConverter, NotesConvertOptions
    from .output import MIDIExporter, MidiWriteOptions, ExportMode

    if output is None:
        output = input_file.with_suffix(".mid")

    model_output = _load_model_output(input_file)
    if not json_output:
        console.print(f"[blue]Loaded model output:[/blue] {input_file}")
        if verbose:
            console.print(f"  Frames: {model_output.n_frames}, Duration: {model_output.duration:.2f}s")

    notes_options = NotesConvertOptions(
        onset_threshold=onset_threshold,
        frame_threshold=frame_threshold,
        min_note_length=min_note_length,
        energy_threshold=energy_threshold,
        min_freq=min_freq,
        max_freq=max_freq,
        infer_onsets=infer_onsets,
        include_pitch_bends=pitch_bend,
        melodia_trick=melodia,
    )
    midi_options = MidiWriteOptions(
        tempo=tempo,
        program=program,
        mode=ExportMode.TRACK_PER_PITCH if multi_track else ExportMode.SINGLE_TRACK,
    )

    if not json_output:
        console.print("[blue]Converting to notes...[/blue]")
    try:
        notes = NotesConverter(model_output).convert(notes_options)
    except RuntimeError as e:
        console.print(f"[red]Conversion failed: {e}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"  Detected {len(notes)} notes")
        console.print(f"[blue]Exporting to:[/blue] {output}")

    exporter = MIDIExporter(midi_options)
    exporter.export(notes, output)

    if json_output:
        result = {
            "input": str(input_file),
            "output": str(output),
            "notes_count": len(notes),
            "frames": model_output.n_frames,
            "tempo": tempo,
            "mode": midi_options.mode.value,
            "pitch_bends": sum(1 for n in notes if n.pitch_bend),
        }
        console.print_json(data=result)
        return

    console.print("[green]Conversion complete![/green]")
    if verbose and notes:
        _show_notes_table(notes)


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Model output .npz file"),
):
    """Show model output information."""
    from .core.constants import ANNOTATIONS_FPS

    model_output = _load_model_output(input_file)

    table = Table(title=f"Model Output: {input_file.name}")
    table.add_column("Matrix", style="cyan")
    table.add_column("Shape", style="green")
    table.add_column("Max", style="yellow")

    for name, matrix in (
        ("onset", model_output.onsets),
        ("note", model_output.frames),
        ("contour", model_output.contours),
    ):
        peak = f"{matrix.max():.3f}" if matrix.size else "-"
        table.add_row(name, f"{matrix.shape[0]} x {matrix.shape[1]}", peak)

    console.print(table)
    console.print(f"  Frame rate: {ANNOTATIONS_FPS} fps")
    console.print(f"  Duration: {model_output.duration:.2f}s")


def _show_notes_table(notes: List):
    """Display notes in a table."""
    table = Table(title="Detected Notes")
    table.add_column("Pitch", style="cyan")
    table.add_column("Start (s)", style="green")
    table.add_column("Duration (s)", style="yellow")
    table.add_column("Velocity", style="magenta")
    table.add_column("Bend", style="blue")

    for note in sorted(notes, key=lambda n: n.sort_key):
        table.add_row(
            note.pitch_name,
            f"{note.start_time:.3f}",
            f"{note.duration:.3f}",
            str(note.velocity),
            str(len(note.pitch_bend)) if note.pitch_bend else "-",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
