"""
Main NiceGUI application for GraphWalk.

Builds one GraphSession per page, renders it onto an interactive SVG canvas
with ui.interactive_image, and wires the toolbar, node-naming dialog,
start-node dropdown, toast notifications and activity log to it.
"""

from nicegui import ui
import sys
import logging
from collections import deque

from dotenv import load_dotenv
from graphwalk.paths import get_env_path
load_dotenv(get_env_path())

from graphwalk.config import get_settings
from graphwalk.interaction import Mode
from graphwalk.session import GraphSession
from graphwalk.traversal import Algorithm, Delays

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

MODE_BUTTONS = [
    (Mode.PLACE_NODE, 'add_circle', 'Add Node'),
    (Mode.CONNECT_EDGE, 'timeline', 'Connect'),
    (Mode.PAN, 'pan_tool', 'Pan'),
    (Mode.DELETE, 'delete', 'Delete'),
]


# Helper to build the node naming dialog
def build_node_name_dialog(on_confirm, on_cancel):
    """
    Create the modal asking for a node name.

    Returns:
        (dialog, open_with_default) where open_with_default(label, placement)
        pre-fills the input and opens the dialog. on_cancel receives the
        placement the dialog was opened for.
    """
    # placements in the order the dialog was opened; each hide consumes the oldest
    opened = deque()

    with ui.dialog() as dialog, ui.card().classes('w-96'):
        ui.label('Name this location').classes('text-lg font-bold')
        name_input = ui.input('Node Name').classes('w-full').props('autofocus')

        def do_confirm():
            if on_confirm(name_input.value or ''):
                dialog.close()

        def do_cancel():
            if opened:
                on_cancel(opened[0])
            dialog.close()

        name_input.on('keydown.enter', do_confirm)

        with ui.row().classes('w-full justify-end gap-2 mt-4'):
            ui.button('Cancel', on_click=do_cancel).props('flat')
            ui.button('Add Node', on_click=do_confirm).props('color=primary')

    def on_hide():
        # hide arrives after close(), possibly once a newer placement is pending
        if opened:
            on_cancel(opened.popleft())

    dialog.on('hide', on_hide)

    def open_with_default(label: str, placement=None):
        opened.append(placement)
        name_input.value = label
        dialog.open()
        name_input.run_method('select')

    return dialog, open_with_default


# UI Construction - encapsulated in page function so each tab gets its own session
@ui.page('/')
def main_page():
    ui.dark_mode().enable()
    ui.query('body').style('margin: 0; padding: 0; overflow: hidden;')

    session = GraphSession(
        width=settings.canvas_width,
        height=settings.canvas_height,
        delays=Delays(
            bfs_visit=settings.bfs_visit_delay,
            bfs_fanout=settings.bfs_fanout_delay,
            dfs_visit=settings.dfs_visit_delay,
        ),
    )
    mode_buttons = {}

    # --- Dialog ---
    def confirm_name(label: str) -> bool:
        return session.confirm_node(label) is not None

    _, open_name_dialog = build_node_name_dialog(confirm_name, session.cancel_node)

    # --- Layout ---
    with ui.row().classes('w-full h-screen no-wrap gap-0'):
        # 1. Side panel
        with ui.column().classes('w-80 h-full p-4 gap-3 bg-slate-900 border-r border-slate-700'):
            with ui.row().classes('items-center gap-2'):
                ui.icon('hub', size='md').classes('text-primary')
                ui.label(settings.title).classes('text-xl font-bold')

            ui.label('Tools').classes('text-xs font-bold text-gray-400')
            with ui.row().classes('gap-1'):
                for mode, icon, tooltip in MODE_BUTTONS:
                    def make_mode_handler(m):
                        def handler():
                            if session.set_mode(m):
                                refresh_toolbar()
                        return handler

                    btn = ui.button(icon=icon, on_click=make_mode_handler(mode)).props('flat dense')
                    btn.tooltip(tooltip)
                    mode_buttons[mode] = btn

            ui.label('Algorithms').classes('text-xs font-bold text-gray-400')
            start_select = ui.select(
                options={},
                label='Select Start Node...',
                clearable=True,
                on_change=lambda e: session.select_start(e.value),
            ).classes('w-full').props('outlined dense')

            async def run_bfs():
                await session.run_traversal(Algorithm.BFS)

            async def run_dfs():
                await session.run_traversal(Algorithm.DFS)

            with ui.row().classes('w-full gap-2'):
                ui.button('BFS', icon='waves', on_click=run_bfs).props('color=primary').classes('flex-1')
                ui.button('DFS', icon='call_split', on_click=run_dfs).props('color=secondary').classes('flex-1')

            with ui.row().classes('w-full gap-2'):
                ui.button('Reset Colors', icon='format_color_reset', on_click=session.reset_colors).props('flat dense')
                ui.button('Clear Map', icon='delete_sweep', on_click=session.clear_map).props('flat dense color=negative')

            ui.label('Activity').classes('text-xs font-bold text-gray-400')
            activity_log = ui.log().classes('w-full flex-grow text-xs')
            status_label = ui.label('').classes('text-xs text-gray-500')

        # 2. Canvas
        with ui.column().classes('relative flex-grow h-full gap-0 overflow-hidden'):
            instructions = ui.label('').classes(
                'absolute top-4 left-1/2 -translate-x-1/2 z-10 px-4 py-1 rounded-full text-sm bg-primary'
            )
            canvas = ui.interactive_image(
                size=(settings.canvas_width, settings.canvas_height),
                events=['mousedown', 'mousemove', 'mouseup'],
                cross=False,
            ).classes('bg-slate-950')

            with ui.column().classes('absolute bottom-4 right-4 z-10 gap-1'):
                ui.button(icon='add', on_click=lambda: session.zoom(1)).props('round dense')
                ui.button(icon='remove', on_click=lambda: session.zoom(-1)).props('round dense')
                ui.button(icon='center_focus_strong', on_click=session.reset_view).props('round dense').tooltip('Reset View')

    # --- Wiring ---
    def refresh_toolbar():
        for mode, btn in mode_buttons.items():
            btn.props(f'color={"primary" if mode is session.controller.mode else "grey"}')
        instructions.text = session.controller.instructions

    def refresh_select():
        start_select.options = session.selection_options()
        start_select.value = session.start_node
        start_select.update()

    session.set_listeners(
        on_log=activity_log.push,
        on_notify=lambda msg: ui.notify(msg, position='top', timeout=3000),
        on_nodes_changed=refresh_select,
        on_label_request=lambda label: open_name_dialog(label, session.controller.placement),
    )

    def handle_mouse(e):
        controller = session.controller
        if e.type == 'mousedown':
            controller.pointer_down(e.image_x, e.image_y, e.button)
        elif e.type == 'mousemove':
            controller.pointer_move(e.image_x, e.image_y)
        elif e.type == 'mouseup':
            controller.pointer_up()

    def handle_wheel(e):
        args = e.args[0] if isinstance(e.args, list) else (e.args or {})
        session.wheel(
            args.get('offsetX', 0),
            args.get('offsetY', 0),
            args.get('deltaY', 0),
            args.get('clientWidth', 0),
            args.get('clientHeight', 0),
        )

    canvas.on_mouse(handle_mouse)
    # offsets are CSS pixels; the element size lets the session map them to image pixels
    canvas.on('wheel.prevent', handle_wheel, js_handler='''(e) => emit({
        offsetX: e.offsetX,
        offsetY: e.offsetY,
        deltaY: e.deltaY,
        clientWidth: e.target.clientWidth,
        clientHeight: e.target.clientHeight,
    })''')

    def draw_frame():
        canvas.content = session.render_loop.tick(settings.frame_interval)
        status_label.text = session.status_text()

    ui.timer(settings.frame_interval, draw_frame)

    refresh_toolbar()
    session.seed_demo()
    logger.info(f"Page ready: {session.status_text()}")


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title=settings.title,
        port=settings.port,
        reload=not getattr(sys, 'frozen', False),
    )
