"""Headless scene renderer, CLI entry point.

Loads a compact scene document and prints it as a colorized braille frame,
or writes the composite to a PNG.

Usage:
    glitter-render <input_file> [--png OUT] [--scale N] [--active LAYER] [-v]

Examples:
    glitter-render scene.json
    glitter-render scene.json --active components
    glitter-render scene.json --png scene.png --scale 4
"""

import sys
import os
import argparse
import logging

from glitter.models.errors import SceneError
from glitter.services.file_operations import load_scene_from_file
from glitter.services.image_export import export_png


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Render a glitter scene document as braille text or PNG (headless).',
    )
    parser.add_argument(
        'input_file',
        help='Path to a compact scene JSON file.',
    )
    parser.add_argument(
        '--png',
        metavar='OUT',
        help='Write the composite to a PNG file instead of printing the frame.',
    )
    parser.add_argument(
        '--scale',
        type=int,
        default=1,
        help='Integer upscale factor for PNG output (default: 1).',
    )
    parser.add_argument(
        '--active',
        metavar='LAYER',
        help='Layer to highlight as active (default: last layer).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    input_path = os.path.abspath(args.input_file)
    if not os.path.isfile(input_path):
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        scene, warnings = load_scene_from_file(input_path)
    except SceneError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if args.active:
        try:
            scene.set_active_layer(args.active)
        except SceneError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if args.png:
        if args.scale < 1:
            print("Error: --scale must be >= 1", file=sys.stderr)
            return 1
        export_png(scene, args.png, scale=args.scale)
        print(f"Rendered {scene.width_px}x{scene.height_px} px scene to {args.png}")
    else:
        sys.stdout.write(scene.render())

    return 0


if __name__ == '__main__':
    sys.exit(main())
