"""Scriptable document host for behavioral checks.

The host is a V8 isolate (via mini-racer) with a deliberately small
document stub: elements come from a hard-coded markup fixture, lookups are
by id or tag name, and only the properties the calculator script touches
are modelled (value, textContent, className/classList, listeners). It is
not a general DOM.

The document stays in the "loading" state: DOMContentLoaded handlers are
registered but never fired, so page wiring that expects a full document
does not run before the checked entry point is called.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from py_mini_racer import MiniRacer

from .markup import MarkupIndex
from .types import HostError

log = logging.getLogger(__name__)


_PRELUDE = r"""
var __host = (function () {
  var errors = [];
  var logs = [];
  var registry = [];

  function makeClassList(el) {
    function read() { return String(el.className || "").split(/\s+/).filter(Boolean); }
    function write(list) { el.className = list.join(" "); }
    return {
      add: function () { var l = read(); for (var i = 0; i < arguments.length; i++) { if (l.indexOf(arguments[i]) < 0) l.push(arguments[i]); } write(l); },
      remove: function () { var drop = Array.prototype.slice.call(arguments); write(read().filter(function (c) { return drop.indexOf(c) < 0; })); },
      contains: function (c) { return read().indexOf(c) >= 0; },
      toggle: function (c, force) {
        var has = read().indexOf(c) >= 0;
        var want = (force === undefined) ? !has : !!force;
        if (want && !has) this.add(c);
        if (!want && has) this.remove(c);
        return want;
      }
    };
  }

  function makeElement(spec) {
    var attrs = spec.attrs || {};
    var el = {
      tagName: String(spec.tag || "div").toUpperCase(),
      id: spec.id || "",
      className: spec.className || "",
      textContent: spec.text || "",
      value: attrs.value !== undefined && attrs.value !== null ? String(attrs.value) : "",
      type: attrs.type || "",
      name: attrs.name || "",
      checked: attrs.checked !== undefined,
      style: {},
      dataset: {},
      _attrs: attrs,
      _listeners: {},
      addEventListener: function (type, fn) { (this._listeners[type] = this._listeners[type] || []).push(fn); },
      removeEventListener: function (type, fn) { var l = this._listeners[type] || []; var i = l.indexOf(fn); if (i >= 0) l.splice(i, 1); },
      dispatchEvent: function (evt) { var l = (this._listeners[evt.type] || []).slice(); for (var i = 0; i < l.length; i++) l[i].call(this, evt); return true; },
      click: function () { this.dispatchEvent({ type: "click", target: this }); },
      getAttribute: function (n) { return n in this._attrs ? this._attrs[n] : null; },
      setAttribute: function (n, v) { this._attrs[n] = String(v); if (n === "class") this.className = String(v); if (n === "id") this.id = String(v); },
      hasAttribute: function (n) { return n in this._attrs; },
      removeAttribute: function (n) { delete this._attrs[n]; },
      appendChild: function (child) { return child; }
    };
    el.classList = makeClassList(el);
    registry.push(el);
    return el;
  }

  function byTag(tag) {
    var t = String(tag).toUpperCase();
    return registry.filter(function (el) { return el.tagName === t; });
  }

  function query(sel) {
    sel = String(sel).trim();
    if (sel.charAt(0) === "#") return registry.filter(function (el) { return el.id === sel.slice(1); });
    if (sel.charAt(0) === ".") return registry.filter(function (el) { return el.classList.contains(sel.slice(1)); });
    var m = /^([a-zA-Z]*)\[name=["']?([^"'\]]+)["']?\]$/.exec(sel);
    if (m) return registry.filter(function (el) { return el.name === m[2] && (!m[1] || el.tagName === m[1].toUpperCase()); });
    return byTag(sel);
  }

  function mount(specs) {
    registry.length = 0;
    var html = null, body = null;
    for (var i = 0; i < specs.length; i++) {
      var el = makeElement(specs[i]);
      if (el.tagName === "HTML" && !html) html = el;
      if (el.tagName === "BODY" && !body) body = el;
    }
    var docListeners = {};
    globalThis.window = globalThis;
    globalThis.document = {
      readyState: "loading",
      documentElement: html || makeElement({ tag: "html" }),
      body: body || makeElement({ tag: "body" }),
      getElementById: function (id) { for (var i = 0; i < registry.length; i++) { if (registry[i].id === id) return registry[i]; } return null; },
      getElementsByTagName: byTag,
      getElementsByName: function (n) { return registry.filter(function (el) { return el.name === n; }); },
      getElementsByClassName: function (c) { return registry.filter(function (el) { return el.classList.contains(c); }); },
      querySelector: function (s) { var r = query(s); return r.length ? r[0] : null; },
      querySelectorAll: query,
      createElement: function (tag) { return makeElement({ tag: tag }); },
      addEventListener: function (type, fn) { (docListeners[type] = docListeners[type] || []).push(fn); },
      removeEventListener: function () {}
    };
    globalThis.addEventListener = function () {};
    globalThis.console = {
      log: function () { logs.push(Array.prototype.join.call(arguments, " ")); },
      warn: function () { logs.push(Array.prototype.join.call(arguments, " ")); },
      error: function () { logs.push(Array.prototype.join.call(arguments, " ")); },
      info: function () { logs.push(Array.prototype.join.call(arguments, " ")); }
    };
    return registry.length;
  }

  function inject(src) {
    try { (0, eval)(src); return true; }
    catch (e) { errors.push(String(e && e.message ? e.message : e)); return false; }
  }

  function invoke(name, args) {
    var fn = globalThis[name];
    if (typeof fn !== "function") return JSON.stringify({ called: false, error: null });
    try { fn.apply(globalThis, args || []); return JSON.stringify({ called: true, error: null }); }
    catch (e) { var msg = String(e && e.message ? e.message : e); errors.push(msg); return JSON.stringify({ called: true, error: msg }); }
  }

  function snapshot() {
    var els = {};
    for (var i = 0; i < registry.length; i++) {
      var el = registry[i];
      if (!el.id) continue;
      els[el.id] = { tag: el.tagName.toLowerCase(), text: String(el.textContent), value: String(el.value), className: String(el.className) };
    }
    return JSON.stringify({
      body: { className: String(document.body.className) },
      root: { className: String(document.documentElement.className) },
      elements: els,
      errors: errors,
      logs: logs
    });
  }

  return { mount: mount, inject: inject, invoke: invoke, snapshot: snapshot };
})();
"""


def _element_specs(markup: str) -> List[Dict[str, Any]]:
    specs: List[Dict[str, Any]] = []
    for el in MarkupIndex(markup).elements:
        specs.append({
            "tag": el.tag,
            "id": el.id or "",
            "className": " ".join(el.classes),
            "text": el.text,
            "attrs": {k: ("" if v is None else v) for k, v in el.attrs.items()},
        })
    return specs


class ScriptHost:
    """One isolated host per behavioral check; never reused across checks.

    Use as a context manager so the V8 isolate is released when the check
    finishes.
    """

    def __init__(self, fixture: str, *, timeout_ms: Optional[int] = None) -> None:
        self.timeout_ms = timeout_ms
        self._ctx: Optional[MiniRacer] = None
        try:
            self._ctx = MiniRacer()
            self._eval(_PRELUDE)
            count = self._eval(f"__host.mount({json.dumps(_element_specs(fixture))})")
        except HostError:
            self.close()
            raise
        except Exception as exc:
            self.close()
            raise HostError(f"could not start script host: {exc}") from exc
        log.debug("script host mounted %s fixture elements", count)

    def __enter__(self) -> "ScriptHost":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._ctx is None

    def close(self) -> None:
        ctx, self._ctx = self._ctx, None
        if ctx is not None:
            ctx.close()

    def _eval(self, code: str) -> Any:
        if self._ctx is None:
            raise HostError("script host is closed")
        try:
            if self.timeout_ms:
                return self._ctx.eval(code, timeout=self.timeout_ms)
            return self._ctx.eval(code)
        except Exception as exc:
            raise HostError(f"script host evaluation failed: {exc}") from exc

    def inject(self, script: str) -> bool:
        """Run artifact script text like an inline <script>; errors stay in the host."""
        return bool(self._eval(f"__host.inject({json.dumps(script or '')})"))

    def invoke(self, name: str, *args: Any) -> Dict[str, Any]:
        raw = self._eval(f"__host.invoke({json.dumps(name)}, {json.dumps(list(args))})")
        return json.loads(str(raw))

    def snapshot(self) -> Dict[str, Any]:
        return json.loads(str(self._eval("__host.snapshot()")))
