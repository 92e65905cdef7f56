"""WSL capture backend bridging to the Windows host through ``powershell.exe``.

Inside WSL the Linux side has no access to the Windows desktop, so every
operation runs a PowerShell script on the host. Captures print the PNG as
base64 on stdout; listings print JSON.
"""

import base64
import binascii

from ..capture_exceptions import CaptureFailedError, CommandError, WindowNotFoundError
from ..config import CaptureSettings
from ..imaging import require_image
from ..interfaces.capture_backend import ICaptureBackend
from ..logging import get_logger
from ..models import DisplayInfo, RegionInfo, WindowInfo
from ..parsers.windows import parse_powershell_displays, parse_powershell_windows
from ..process import Command, CommandRunner

logger = get_logger(__name__)

POWERSHELL = "powershell.exe"

MINIMIZED_MARKER = "Window is minimized"

_USER32 = '''
Add-Type @"
using System;
using System.Runtime.InteropServices;
public class DeskCaptureUser32 {
    [StructLayout(LayoutKind.Sequential)]
    public struct RECT { public int Left; public int Top; public int Right; public int Bottom; }
    [StructLayout(LayoutKind.Sequential)]
    public struct POINT { public int X; public int Y; }
    [DllImport("user32.dll")] public static extern bool SetProcessDPIAware();
    [DllImport("user32.dll")] public static extern bool GetWindowRect(IntPtr hWnd, out RECT rect);
    [DllImport("user32.dll")] public static extern bool GetClientRect(IntPtr hWnd, out RECT rect);
    [DllImport("user32.dll")] public static extern bool ClientToScreen(IntPtr hWnd, ref POINT point);
    [DllImport("user32.dll")] public static extern bool IsIconic(IntPtr hWnd);
}
"@
[void][DeskCaptureUser32]::SetProcessDPIAware()
'''

_CAPTURE_RECT = '''
Add-Type -AssemblyName System.Drawing
function Capture-Rect([int]$x, [int]$y, [int]$w, [int]$h) {
    $bitmap = New-Object System.Drawing.Bitmap $w, $h
    $graphics = [System.Drawing.Graphics]::FromImage($bitmap)
    try {
        $graphics.CopyFromScreen($x, $y, 0, 0, $bitmap.Size)
        $stream = New-Object System.IO.MemoryStream
        $bitmap.Save($stream, [System.Drawing.Imaging.ImageFormat]::Png)
        [Convert]::ToBase64String($stream.ToArray())
    } finally {
        $graphics.Dispose()
        $bitmap.Dispose()
    }
}
'''

_PRELUDE = _USER32 + _CAPTURE_RECT

SCREEN_SCRIPT = _PRELUDE + """
Add-Type -AssemblyName System.Windows.Forms
$b = [System.Windows.Forms.SystemInformation]::VirtualScreen
Capture-Rect $b.X $b.Y $b.Width $b.Height
"""

# Bodies below are str.format templates, prefixed with _PRELUDE after formatting
REGION_BODY = "\nCapture-Rect {x} {y} {width} {height}\n"

WINDOW_BODY = """
$hwnd = [IntPtr]{hwnd}
if ([DeskCaptureUser32]::IsIconic($hwnd)) {{ throw "{marker}" }}
$rect = New-Object DeskCaptureUser32+RECT
if (${include_frame}) {{
    if (-not [DeskCaptureUser32]::GetWindowRect($hwnd, [ref]$rect)) {{ throw "GetWindowRect failed" }}
    $x = $rect.Left; $y = $rect.Top
    $w = $rect.Right - $rect.Left; $h = $rect.Bottom - $rect.Top
}} else {{
    if (-not [DeskCaptureUser32]::GetClientRect($hwnd, [ref]$rect)) {{ throw "GetClientRect failed" }}
    $origin = New-Object DeskCaptureUser32+POINT
    [void][DeskCaptureUser32]::ClientToScreen($hwnd, [ref]$origin)
    $x = $origin.X; $y = $origin.Y
    $w = $rect.Right; $h = $rect.Bottom
}}
Capture-Rect $x $y $w $h
"""

DISPLAYS_SCRIPT = """
Add-Type -AssemblyName System.Windows.Forms
$i = 0
$screens = foreach ($s in [System.Windows.Forms.Screen]::AllScreens) {
    [PSCustomObject]@{
        id = [string]$i
        name = $s.DeviceName
        x = $s.Bounds.X
        y = $s.Bounds.Y
        width = $s.Bounds.Width
        height = $s.Bounds.Height
        primary = $s.Primary
    }
    $i++
}
$screens | ConvertTo-Json -Compress
"""

WINDOWS_SCRIPT = (
    _USER32
    + """
$windows = Get-Process | Where-Object { $_.MainWindowHandle -ne 0 -and $_.MainWindowTitle } | ForEach-Object {
    $rect = New-Object DeskCaptureUser32+RECT
    [void][DeskCaptureUser32]::GetWindowRect($_.MainWindowHandle, [ref]$rect)
    [PSCustomObject]@{
        id = $_.MainWindowHandle.ToInt64()
        title = $_.MainWindowTitle
        processId = $_.Id
        processName = $_.ProcessName
        x = $rect.Left
        y = $rect.Top
        width = $rect.Right - $rect.Left
        height = $rect.Bottom - $rect.Top
        isMinimized = [DeskCaptureUser32]::IsIconic($_.MainWindowHandle)
    }
}
$windows | ConvertTo-Json -Compress
"""
)


class WSLBackend(ICaptureBackend):
    """Capture the Windows host desktop from inside WSL."""

    name = "wsl"

    def __init__(self, settings: CaptureSettings, runner: CommandRunner) -> None:
        """Initialize the backend.

        Args:
            settings: Capture settings
            runner: Command runner
        """
        self.settings = settings
        self.runner = runner

    def run_powershell(self, script: str) -> str:
        """Run a script on the Windows host.

        Args:
            script: PowerShell source

        Returns:
            Decoded stdout
        """
        command = Command(args=(POWERSHELL, "-NoProfile", "-NonInteractive", "-Command", script))
        logger.debug("powershell_script_started", script_chars=len(script))
        return self.runner(command).decode("utf-8", errors="replace")

    def _capture(self, script: str, operation: str) -> bytes:
        output = self.run_powershell(script).strip()
        if not output:
            raise CaptureFailedError("no image data returned", operation=operation)

        try:
            data = base64.b64decode(output, validate=True)
        except binascii.Error as e:
            raise CaptureFailedError(f"invalid base64 output: {e}", operation=operation) from e
        return require_image(data, operation)

    def capture_screen(self, display: DisplayInfo | None = None) -> bytes:
        """Capture the host's virtual screen, or one display's bounds."""
        if display is None:
            return self._capture(SCREEN_SCRIPT, "capture_screen")
        return self._capture(_region_script(display.bounds), "capture_screen")

    def capture_window(self, window: WindowInfo, include_frame: bool) -> bytes:
        """Capture a host window by handle."""
        try:
            hwnd = int(window.id)
        except ValueError as e:
            raise WindowNotFoundError(
                f"Invalid window handle: {window.id}", window_id=window.id
            ) from e

        script = _PRELUDE + WINDOW_BODY.format(
            hwnd=hwnd,
            include_frame="true" if include_frame else "false",
            marker=MINIMIZED_MARKER,
        )
        try:
            return self._capture(script, "capture_window")
        except CommandError as e:
            if MINIMIZED_MARKER in (e.context.get("stderr") or ""):
                raise WindowNotFoundError(
                    MINIMIZED_MARKER, window_id=window.id, minimized=True
                ) from e
            raise

    def capture_region_internal(self, region: RegionInfo) -> bytes:
        """Capture a rectangle of the host desktop."""
        return self._capture(_region_script(region), "capture_region")

    def get_displays(self) -> list[DisplayInfo]:
        """Enumerate host displays."""
        return parse_powershell_displays(self.run_powershell(DISPLAYS_SCRIPT))

    def get_windows(self) -> list[WindowInfo]:
        """Enumerate host windows that own a main window."""
        return parse_powershell_windows(self.run_powershell(WINDOWS_SCRIPT))


def _region_script(region: RegionInfo) -> str:
    return _PRELUDE + REGION_BODY.format(
        x=region.x, y=region.y, width=region.width, height=region.height
    )
