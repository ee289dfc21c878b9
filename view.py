import numpy as np
import matplotlib.pyplot as plt


#####################################################################################
## Console output
def side_by_side(before, after, arrow="  -->  "):
    ##Glue two renderings together line by line
    return "\n".join(f"{b}{arrow}{a}" for b, a in zip(before.splitlines(), after.splitlines()))


def print_board_box(board, title=None):
    if title:
        print(title)
    print(f"Queens: {board.pieces_display()}")
    print(board.render())
    print(f"Conflicts: {board.total_conflicts()}/{board.max_conflicts()}")


def print_move(index, move, before_render, board):
    ##Only moves that lower the heuristic get printed
    if move.progress <= 0:
        return
    print(
        f"Move #{index}: the most conflicted queen {move.source} -> {move.destination} "
        f"(benefit: -{move.progress}h, total: {move.after}h)"
    )
    print(side_by_side(before_render, board.render()))
    print("\n" + "#" * 79 + "\n")


#####################################################################################
## Use of matplotlib
## Grey background, alternating tiles, a Q on every queen coloured by its conflicts
def plot_board(board, show=True):
    n = board.size
    fig, ax = plt.subplots(figsize=(8, 8))
    fig.patch.set_facecolor('grey')
    ax.set_facecolor('grey')

    ##Create alternating pattern (like a chessboard)
    rows, cols = np.indices((n, n))
    chessboard = ((rows + cols) % 2 == 0).astype(float)
    ax.imshow(chessboard, cmap='binary', interpolation='nearest')

    for queen, threats in zip(board.pieces, board.conflict_table):
        ##White Q on black tiles, black Q on white tiles, red when threatened
        if threats:
            color = 'red'
        elif (queen.row + queen.col) % 2 == 0:
            color = 'white'
        else:
            color = 'black'
        ax.text(queen.col, queen.row, 'Q', fontsize=200 / n, ha='center', va='center',
                color=color, weight='bold')

    ax.set_title(f'{n}-Queens | conflicts: {board.total_conflicts()}', color='white', fontsize=16)
    fig.tight_layout()
    if show:
        plt.show()
    return fig


#####################################################################################
def plot_generation_history(history, show=True):
    ##Best survivor and population mean per generation
    fig, ax = plt.subplots(figsize=(8, 8))
    generations = [r.generation for r in history]
    best = [min(r.survivors) for r in history]
    mean = [float(np.mean(r.population)) for r in history]
    ax.plot(generations, best, 'b-', linewidth=2, marker='o', markersize=4, label='best survivor')
    ax.plot(generations, mean, 'g--', linewidth=1, label='population mean')

    ax.set_xlabel('Generation', fontsize=10)
    ax.set_ylabel('Conflicts', fontsize=10)
    ax.set_title('Conflicts per generation')
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    if show:
        plt.show()
    return fig
