import os

# must be set before any module asks for the global settings
os.environ.setdefault('STAKEPOOL_CONFIG_FILE', 'stakepool.conf.unittests')
