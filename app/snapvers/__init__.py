"""snapvers - browse file versions preserved in filesystem snapshots."""

__version__ = "0.4.0"
