"""
Management command to convert markdown files to Confluence storage format.
"""

import logging
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from converter.markdown.errors import ConversionError
from converter.markdown.renderer import render_storage_format

# Django's --verbosity (0-3) mapped onto the converter loggers
VERBOSITY_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
}


class Command(BaseCommand):
    help = 'Convert markdown files (with {{...}} directives) to storage format XHTML'

    def add_arguments(self, parser):
        parser.add_argument(
            'paths',
            nargs='+',
            type=str,
            help='Markdown files to convert',
        )
        parser.add_argument(
            '--output',
            type=str,
            help='Output file (only valid with a single input)',
        )
        parser.add_argument(
            '--output-dir',
            type=str,
            help='Directory for output files (default: next to each input)',
        )
        parser.add_argument(
            '--suffix',
            type=str,
            default='.xhtml',
            help='Suffix for generated files (default: .xhtml)',
        )
        parser.add_argument(
            '--print',
            action='store_true',
            dest='print_output',
            help='Print the result instead of writing files',
        )

    def handle(self, *args, **options):
        paths = [Path(p) for p in options['paths']]
        output = options.get('output')
        output_dir = options.get('output_dir')
        suffix = options.get('suffix')
        print_output = options.get('print_output')

        logging.getLogger('converter').setLevel(
            VERBOSITY_LEVELS.get(options.get('verbosity', 1), logging.WARNING)
        )

        if output and len(paths) > 1:
            raise CommandError('--output can only be used with a single input file')
        if output_dir:
            Path(output_dir).mkdir(parents=True, exist_ok=True)

        total = len(paths)
        for i, path in enumerate(paths, 1):
            if not path.is_file():
                raise CommandError(f'No such file: {path}')

            if options.get('verbosity', 1) > 1:
                self.stderr.write(f'[{i}/{total}] Converting: {path}')

            try:
                result = render_storage_format(path.read_text(encoding='utf-8'))
            except ConversionError as e:
                raise CommandError(f'Could not convert {path}: {e}') from e

            if print_output:
                self.stdout.write(result)
                continue

            if output:
                target = Path(output)
            elif output_dir:
                target = Path(output_dir) / path.with_suffix(suffix).name
            else:
                target = path.with_suffix(suffix)

            target.write_text(result, encoding='utf-8')
            self.stdout.write(self.style.SUCCESS(f'  Wrote {target}'))

        if not print_output:
            self.stdout.write(
                self.style.SUCCESS(f'\nCompleted! Converted {total} file(s)')
            )
