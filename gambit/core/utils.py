def format_info(choice) -> str:
    """One-line summary of a move decision, in the spirit of a UCI info line."""
    score = "-" if choice.score is None else choice.score
    nps = int(choice.nodes / (choice.elapsed_ms / 1000)) if choice.elapsed_ms > 0 else 0
    return (
        f"bestmove {choice.move or '(none)'} source {choice.source} score {score} "
        f"nodes {choice.nodes} nps {nps} time {int(choice.elapsed_ms)}"
    )
