"""QR code rendering of the join code.

Lets a Spot-Remote pair by scanning the screen instead of typing the
join code.
"""

import io

import qrcode
from qrcode.main import QRCode


class JoinCodeQr:
    """Render a join code as a QR code."""

    def __init__(self, join_code: str):
        """Initialize QR renderer.

        Args:
            join_code: Join code to encode.

        Raises:
            ValueError: If join_code is empty.
        """
        if not join_code:
            raise ValueError("No join code to render")
        self.join_code = join_code

    def _create_qr(self) -> QRCode:
        qr = qrcode.QRCode(
            version=None,  # Auto-size
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(self.join_code)
        qr.make(fit=True)
        return qr

    def to_terminal(self) -> str:
        """Generate ASCII art for terminal display."""
        qr = self._create_qr()

        output = io.StringIO()
        qr.print_ascii(out=output, invert=True)
        return output.getvalue()

    def to_png(self, path: str) -> None:
        """Save QR code as PNG file. Requires Pillow."""
        qr = self._create_qr()
        img = qr.make_image(fill_color="black", back_color="white")
        img.save(path)
