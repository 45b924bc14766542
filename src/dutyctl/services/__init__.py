"""Operations the CLI exposes, each returning a ServiceResult.

Services read the published snapshot through the Roster and never
import from commands or output.
"""
