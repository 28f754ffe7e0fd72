"""Rich terminal rendering of an activity snapshot."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from modules.spotify.models import AggregatedActivity, Track

console = Console()


def format_duration(ms: int) -> str:
    """Format milliseconds as m:ss, or h:mm:ss from one hour up.

    Example: 215000 -> "3:35"
    """
    total_seconds = max(ms, 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _track_table(title: str, tracks: list[Track]) -> Table:
    table = Table(title=title, title_justify="left", expand=True)
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Track")
    table.add_column("Artist", style="cyan")
    table.add_column("Length", justify="right")
    for index, track in enumerate(tracks, start=1):
        name = f"[green]▶[/green] {track.name}" if track.now_playing else track.name
        table.add_row(str(index), name, track.artist, format_duration(track.duration))
    return table


def render_activity(activity: AggregatedActivity) -> None:
    """Print profile, now playing, top items and recent tracks."""
    user = activity.user
    console.print(
        Panel(
            f"[bold]{user.name}[/bold]  [dim]{user.id or ''}[/dim]\n"
            f"Followers: {user.followers}\n{user.url}",
            title="Profile",
            border_style="green",
        )
    )

    current = activity.currently_playing
    if current is not None:
        console.print(
            f"[bold green]Now playing:[/bold green] {current.name} - {current.artist} "
            f"[dim]({format_duration(current.progress)} / {format_duration(current.duration)})[/dim]"
        )
    else:
        console.print("[dim]Nothing playing right now[/dim]")

    console.print(_track_table("Top tracks", activity.top_tracks))

    artists = Table(title="Top artists", title_justify="left", expand=True)
    artists.add_column("#", justify="right", style="dim", width=3)
    artists.add_column("Artist", style="cyan")
    artists.add_column("Link", style="dim")
    for index, artist in enumerate(activity.top_artists, start=1):
        artists.add_row(str(index), artist.name, artist.url)
    console.print(artists)

    console.print(_track_table("Recently played", activity.recent_tracks))
    console.print(
        f"[bold]Listening time:[/bold] {format_duration(activity.total_listening_time)}"
    )
