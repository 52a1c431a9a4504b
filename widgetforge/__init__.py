"""widgetforge — compile TSX widget markup into SwiftUI and Jetpack Compose/Glance sources."""

__version__ = "0.3.0"
