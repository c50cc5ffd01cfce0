"""
sops-decrypt decrypts SOPS encrypted secrets for a CI pipeline run.

Entries in a source directory whose names match a regular expression are
decrypted with 'sops -d' into a destination directory, keeping their names.
A later cleanup step can remove the destination directory again.

Inputs can be given as options or through the INPUT_* environment variables
GitHub Actions sets for an action's inputs.

Decrypt every '.enc' file in 'secrets/' into 'out/':

\b
    $ sops-decrypt decrypt --source-dir secrets --dest-dir out \\
        --file-pattern '\\.enc$' --create-dest-dir true

Remove the decrypted secrets at the end of the job:

\b
    $ sops-decrypt cleanup --dest-dir out --delete-dest-dir true
"""

__version__ = '1.0.0'
