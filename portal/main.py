import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv() # Load environment variables from .env file

# Add current directory to path
sys.path.append(str(Path(__file__).parent))

from gradeportal_core.cli import main

if __name__ == "__main__":
    sys.exit(main())
