"""Main entry point for the crack field window."""
from .core.host import BackgroundWindow

def main():
    """Run the window."""
    window = BackgroundWindow(enable_watcher=True)
    window.run()

if __name__ == '__main__':
    main()
