"""Native code generators: SwiftUI (iOS) and Jetpack Compose / Glance (Android)."""

from widgetforge.generators.compose import generate_compose, write_compose_files
from widgetforge.generators.swiftui import generate_swiftui, write_swift_files
from widgetforge.generators.swiftui_activity import generate_live_activity

__all__ = [
    "generate_compose",
    "generate_live_activity",
    "generate_swiftui",
    "write_compose_files",
    "write_swift_files",
]
