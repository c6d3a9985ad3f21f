from solocopy.core.models import FullHashAlgorithm

FULL_HASH_ALIASES = {
    "blake2b": FullHashAlgorithm.BLAKE2B,
    "blake2": FullHashAlgorithm.BLAKE2B,
    "xxh128": FullHashAlgorithm.XXH128,
    "xxh3": FullHashAlgorithm.XXH128,
}

FULL_HASH_CHOICES = list(FULL_HASH_ALIASES.keys())

FULL_HASH_HELP_TEXT = (
    "Algorithm for full-content fingerprints (duplicate key):\n"
    "  blake2b    : BLAKE2b, 128-bit, cryptographic (default)\n"
    "  xxh128     : xxh3, 128-bit, non-cryptographic, faster on large files\n"
    "Example    : %(prog)s ~/old-backup ~/merged --full-hash xxh128\n"
)

WORKERS_HELP_TEXT = (
    "Number of worker threads for scanning, hashing and copying.\n"
    "Default: number of CPUs (max 32)"
)

EPILOG_TEXT = """
Examples:
  Merge an old backup into a consolidated folder, skipping content already there
  %(prog)s ~/backups/2019 ~/backups/merged

  Same as above with 4 workers and progress output
  %(prog)s ~/backups/2019 ~/backups/merged --workers 4 --verbose

  Quiet run for scripts (exit code only)
  %(prog)s ~/backups/2019 ~/backups/merged --quiet

Notes:
  Duplicates are detected against files directly inside the destination
  directory, not inside its subdirectories. All copies land at the
  destination's top level; name clashes become name_1.ext, name_2.ext, ...
"""
