"""brewrelink - hand unmanaged binaries in Homebrew's bin directory back to brew.

Installer packages for tools such as Meld, VirtualBox and OpenZFS copy their
command line binaries straight into the Homebrew prefix. brewrelink moves
them into versioned kegs and links those kegs, so ``brew doctor`` stops
complaining and upgrades replace them cleanly.
"""

__version__ = "1.0.0"
