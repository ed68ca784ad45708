"""Behavior tests for the launcher session state machine.

Drives the controller with a recording backend handle and a recording
overlay shell, checking requests issued and surfaces created/destroyed.
"""

from __future__ import annotations

import copy
import unittest

from lazylauncher.backend.bridge import Exited, ResponseEvent, Started
from lazylauncher.backend.protocol import (
    ActivateContextRequest,
    ActivateRequest,
    CloseRequest,
    CloseResponse,
    ContextOption,
    ContextRequest,
    ContextResponse,
    DesktopEntryResponse,
    FillResponse,
    SearchRequest,
    SearchResult,
    UpdateResponse,
)
from lazylauncher.session import (
    PHASE_AWAITING_FIRST_RESULT,
    PHASE_HIDDEN,
    PHASE_VISIBLE,
    PHASE_VISIBLE_WITH_MENU,
    SessionController,
    SessionOps,
)
from lazylauncher.session import actions
from lazylauncher.surfaces import OverlayShell, Point, Rect, SurfaceManager


class RecordingHandle:
    def __init__(self) -> None:
        self.requests: list[object] = []

    def send(self, request: object) -> bool:
        self.requests.append(request)
        return True


def _result(result_id: int, name: str = "", window: tuple[int, int] | None = None) -> SearchResult:
    return SearchResult(id=result_id, name=name or f"app-{result_id}", description="desc", window=window)


class SessionControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.surface_calls: list[tuple[str, object]] = []
        self.side_effects: list[tuple[str, object]] = []
        self.desktop_execs: dict[str, str | None] = {}
        self.token: str | None = "tok-123"
        shell = OverlayShell(
            create_layer_surface=lambda settings: self.surface_calls.append(("create_main", settings)),
            destroy_layer_surface=lambda surface_id: self.surface_calls.append(("destroy_main", surface_id)),
            create_popup=lambda settings: self.surface_calls.append(("create_menu", settings)),
            destroy_popup=lambda surface_id: self.surface_calls.append(("destroy_menu", surface_id)),
        )
        ops = SessionOps(
            focus_input=lambda: self.side_effects.append(("focus_input", None)),
            focus_next=lambda: self.side_effects.append(("focus_next", None)),
            focus_previous=lambda: self.side_effects.append(("focus_previous", None)),
            load_desktop_exec=lambda path: self.desktop_execs.get(path),
            request_activation_token=lambda: self.token,
            spawn_desktop_exec=lambda exec_line, envs: self.side_effects.append(("spawn", (exec_line, list(envs)))),
        )
        self.controller = SessionController(SurfaceManager(shell), ops)
        self.handle = RecordingHandle()

    # helpers

    def _start_backend(self) -> None:
        self.controller.handle_backend_event(Started(self.handle))
        self.handle.requests.clear()

    def _respond(self, response: object) -> bool:
        return self.controller.handle_backend_event(ResponseEvent(response))

    def _open_with(self, results: list[SearchResult]) -> None:
        self._start_backend()
        self.controller.handle_action(actions.ActivationSignal())
        self._respond(UpdateResponse(tuple(results)))
        self.handle.requests.clear()
        self.surface_calls.clear()

    def _surface_kinds(self) -> list[str]:
        return [kind for kind, _ in self.surface_calls]

    # backend attachment

    def test_started_attaches_handle_and_prewarms_with_empty_search(self) -> None:
        self.controller.handle_backend_event(Started(self.handle))
        self.assertTrue(self.controller.backend.present)
        self.assertEqual(self.handle.requests, [SearchRequest("")])

    def test_exited_keeps_existing_handle(self) -> None:
        self._start_backend()
        self.assertFalse(self.controller.handle_backend_event(Exited(1, will_restart=True)))
        self.assertTrue(self.controller.backend.present)

    # activation / visibility

    def test_activation_while_hidden_searches_and_waits_for_first_result(self) -> None:
        self._start_backend()
        self.controller.state.input_value = "stale"

        self.controller.handle_action(actions.ActivationSignal())

        self.assertEqual(self.handle.requests, [SearchRequest("")])
        self.assertEqual(self.controller.state.input_value, "")
        self.assertEqual(self.controller.phase, PHASE_AWAITING_FIRST_RESULT)
        self.assertEqual(self.surface_calls, [])

    def test_first_update_creates_main_surface_once(self) -> None:
        self._start_backend()
        self.controller.handle_action(actions.ActivationSignal())

        self._respond(UpdateResponse((_result(1),)))
        self._respond(UpdateResponse((_result(2), _result(3))))

        self.assertEqual(self._surface_kinds(), ["create_main"])
        self.assertEqual(self.controller.phase, PHASE_VISIBLE)
        self.assertEqual([item.id for item in self.controller.state.launcher_items], [2, 3])
        settings = self.surface_calls[0][1]
        self.assertEqual(settings.anchor, "top")
        self.assertEqual(settings.keyboard_interactivity, "exclusive")
        self.assertEqual(settings.margin_top, 16)
        self.assertEqual(settings.size_limits.max_width, 600.0)

    def test_update_is_ranked_and_truncated(self) -> None:
        self._start_backend()
        self.controller.handle_action(actions.ActivationSignal())
        results = [_result(i, window=(0, i) if i in {2, 5, 9} else None) for i in range(12)]

        self._respond(UpdateResponse(tuple(results)))

        self.assertEqual(
            [item.id for item in self.controller.state.launcher_items],
            [2, 5, 9, 0, 1, 3, 4, 6, 7, 8],
        )

    def test_activation_before_backend_started_opens_after_first_update(self) -> None:
        self.controller.handle_action(actions.ActivationSignal())
        self.assertEqual(self.controller.phase, PHASE_AWAITING_FIRST_RESULT)

        self.controller.handle_backend_event(Started(self.handle))
        self.assertEqual(self.handle.requests, [SearchRequest("")])
        self._respond(UpdateResponse((_result(1),)))

        self.assertEqual(self._surface_kinds(), ["create_main"])

    def test_activation_while_visible_hides(self) -> None:
        self._open_with([_result(1)])

        self.controller.handle_action(actions.ActivationSignal())

        self.assertEqual(self.handle.requests, [CloseRequest(), SearchRequest("")])
        self.assertEqual(self._surface_kinds(), ["destroy_main"])
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)

    def test_hide_when_hidden_issues_no_surface_destroy(self) -> None:
        self._start_backend()

        self.controller.handle_action(actions.Hide())
        self.controller.hide()

        self.assertEqual(self.controller.state.input_value, "")
        self.assertEqual(self.surface_calls, [])
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)

    def test_hide_without_backend_skips_requests(self) -> None:
        self.controller.handle_action(actions.ActivationSignal())

        self.controller.hide()

        self.assertEqual(self.handle.requests, [])
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)

    def test_hide_destroys_menu_before_main(self) -> None:
        self._open_with([_result(4)])
        self.controller.handle_action(actions.CursorMoved(Point(3.0, 4.0)))
        self._respond(ContextResponse(4, (ContextOption(0, "Quit"),)))
        self.surface_calls.clear()

        self.controller.hide()

        self.assertEqual(self._surface_kinds(), ["destroy_menu", "destroy_main"])
        self.assertIsNone(self.controller.state.menu)

    # input

    def test_every_keystroke_issues_one_search_in_order(self) -> None:
        self._open_with([_result(1)])

        for value in ["a", "ap", "app"]:
            self.controller.handle_action(actions.InputChanged(value))

        self.assertEqual(
            self.handle.requests,
            [SearchRequest("a"), SearchRequest("ap"), SearchRequest("app")],
        )
        self.assertEqual(self.controller.state.input_value, "app")

    def test_fill_replaces_input_and_refocuses_without_searching(self) -> None:
        self._open_with([_result(1)])

        self._respond(FillResponse("firefox "))

        self.assertEqual(self.controller.state.input_value, "firefox ")
        self.assertEqual(self.handle.requests, [])
        self.assertIn(("focus_input", None), self.side_effects)

    def test_unfocus_clears_input_and_searches_empty(self) -> None:
        self._open_with([_result(1)])
        self.controller.handle_action(actions.InputChanged("fi"))
        self.handle.requests.clear()

        self.controller.handle_action(actions.Unfocus())

        self.assertEqual(self.controller.state.input_value, "")
        self.assertEqual(self.handle.requests, [SearchRequest("")])

    def test_focus_navigation_is_delegated(self) -> None:
        self._open_with([_result(1)])
        self.controller.handle_action(actions.FocusNext())
        self.controller.handle_action(actions.FocusPrevious())
        self.assertEqual(self.side_effects, [("focus_next", None), ("focus_previous", None)])

    # activation of results

    def test_activate_valid_index_sends_result_id(self) -> None:
        self._open_with([_result(7), _result(8)])
        self.controller.handle_action(actions.Activate(1))
        self.assertEqual(self.handle.requests, [ActivateRequest(8)])

    def test_activate_out_of_range_is_a_noop(self) -> None:
        self._open_with([_result(1), _result(2), _result(3)])
        before = copy.deepcopy(self.controller.state)

        changed = self.controller.handle_action(actions.Activate(15))

        self.assertFalse(changed)
        self.assertEqual(self.handle.requests, [])
        self.assertEqual(self.controller.state, before)

    # context menu

    def test_context_menu_opens_at_pointer_then_toggles_closed(self) -> None:
        self._open_with([_result(1), _result(2)])
        self.controller.handle_action(actions.CursorMoved(Point(11.6, 7.2)))

        self.controller.handle_action(actions.Context(1))
        self.assertEqual(self.handle.requests, [ContextRequest(2)])
        self._respond(ContextResponse(2, (ContextOption(0, "New Window"), ContextOption(1, "Quit"))))

        self.assertEqual(self.controller.phase, PHASE_VISIBLE_WITH_MENU)
        self.assertEqual(self._surface_kinds(), ["create_menu"])
        popup = self.surface_calls[0][1]
        self.assertEqual(popup.anchor_rect, Rect(12, 7, 1, 1))
        self.assertEqual((popup.anchor, popup.gravity), ("right", "right"))
        self.assertTrue(popup.grab)
        self.assertEqual((popup.size_limits.max_width, popup.size_limits.max_height), (300.0, 800.0))

        self.handle.requests.clear()
        self.controller.handle_action(actions.Context(0))

        self.assertEqual(self.handle.requests, [])
        self.assertEqual(self._surface_kinds(), ["create_menu", "destroy_menu"])
        self.assertIsNone(self.controller.state.menu)

    def test_context_without_pointer_sends_nothing(self) -> None:
        self._open_with([_result(1)])
        self.controller.handle_action(actions.Context(0))
        self.assertEqual(self.handle.requests, [])

    def test_context_response_without_pointer_is_dropped(self) -> None:
        self._open_with([_result(1)])
        self._respond(ContextResponse(1, (ContextOption(0, "Quit"),)))
        self.assertIsNone(self.controller.state.menu)
        self.assertEqual(self.surface_calls, [])

    def test_empty_context_options_are_ignored(self) -> None:
        self._open_with([_result(1)])
        self.controller.handle_action(actions.CursorMoved(Point(1.0, 1.0)))
        self.assertFalse(self._respond(ContextResponse(1, ())))
        self.assertIsNone(self.controller.state.menu)

    def test_context_response_while_hidden_is_dropped(self) -> None:
        self._start_backend()
        self.controller.handle_action(actions.CursorMoved(Point(1.0, 1.0)))
        self._respond(ContextResponse(1, (ContextOption(0, "Quit"),)))
        self.assertIsNone(self.controller.state.menu)
        self.assertEqual(self.surface_calls, [])

    def test_menu_button_closes_menu_and_activates_context(self) -> None:
        self._open_with([_result(5)])
        self.controller.handle_action(actions.CursorMoved(Point(2.0, 2.0)))
        self._respond(ContextResponse(5, (ContextOption(3, "Quit"),)))
        self.surface_calls.clear()

        self.controller.handle_action(actions.MenuButton(5, 3))

        self.assertEqual(self.handle.requests, [ActivateContextRequest(5, 3)])
        self.assertEqual(self._surface_kinds(), ["destroy_menu"])
        self.assertIsNone(self.controller.state.menu)

    def test_escape_closes_only_menu_when_open(self) -> None:
        self._open_with([_result(5)])
        self.controller.handle_action(actions.CursorMoved(Point(2.0, 2.0)))
        self._respond(ContextResponse(5, (ContextOption(3, "Quit"),)))
        self.surface_calls.clear()

        self.controller.handle_action(actions.Hide())

        self.assertEqual(self._surface_kinds(), ["destroy_menu"])
        self.assertEqual(self.controller.phase, PHASE_VISIBLE)
        self.assertEqual(self.handle.requests, [])

        self.controller.handle_action(actions.Hide())

        self.assertEqual(self._surface_kinds(), ["destroy_menu", "destroy_main"])
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)
        self.assertEqual(self.handle.requests, [CloseRequest(), SearchRequest("")])

    def test_close_context_menu_leaves_main_surface(self) -> None:
        self._open_with([_result(5)])
        self.assertFalse(self.controller.handle_action(actions.CloseContextMenu()))
        self.assertEqual(self.surface_calls, [])

    # other hide triggers

    def test_backend_close_response_hides(self) -> None:
        self._open_with([_result(1)])
        self._respond(CloseResponse())
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)
        self.assertEqual(self._surface_kinds(), ["destroy_main"])

    def test_surface_focus_loss_hides_and_focus_gain_refocuses_input(self) -> None:
        self._open_with([_result(1)])
        self.controller.handle_action(actions.SurfaceFocused())
        self.assertEqual(self.side_effects, [("focus_input", None)])

        self.controller.handle_action(actions.SurfaceUnfocused())
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)

    # desktop entries

    def test_desktop_entry_spawns_with_activation_token_then_hides(self) -> None:
        self._open_with([_result(1)])
        self.desktop_execs["/apps/firefox.desktop"] = "firefox %u"

        self._respond(DesktopEntryResponse("/apps/firefox.desktop"))

        self.assertIn(
            (
                "spawn",
                (
                    "firefox %u",
                    [("XDG_ACTIVATION_TOKEN", "tok-123"), ("DESKTOP_STARTUP_ID", "tok-123")],
                ),
            ),
            self.side_effects,
        )
        self.assertEqual(self.controller.phase, PHASE_HIDDEN)

    def test_desktop_entry_without_token_spawns_without_env(self) -> None:
        self._open_with([_result(1)])
        self.desktop_execs["/apps/term.desktop"] = "xterm"
        self.token = None

        self._respond(DesktopEntryResponse("/apps/term.desktop"))

        self.assertIn(("spawn", ("xterm", [])), self.side_effects)

    def test_desktop_entry_without_exec_is_a_noop(self) -> None:
        self._open_with([_result(1)])

        self.assertFalse(self._respond(DesktopEntryResponse("/apps/broken.desktop")))

        self.assertEqual(self.controller.phase, PHASE_VISIBLE)
        self.assertFalse(any(kind == "spawn" for kind, _ in self.side_effects))


if __name__ == "__main__":
    unittest.main()
