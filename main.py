"""
Main game loop for the Werewolf game master.
"""

import argparse
import asyncio
import random
from typing import Callable, Dict, Optional

from dotenv import load_dotenv

from werewolf.core import (
    GameState, GamePhase, Moderator, Player, Team,
    TransitionContext, next_phase, check_transition, IllegalPhaseTransition
)
from werewolf.agents import BaseAgent, SimpleLLMAgent, DummyAgent, HumanAgent, ConsoleReader, DecisionBroker
from werewolf.phases import NightPhaseHandler, DayPhaseHandler, VotingHandler, ReactionHandler
from werewolf.config import GameConfig, load_config
from werewolf.events import EventEmitter, RunRecorder


AgentFactory = Callable[[Player, GameConfig], BaseAgent]

# Phases where play resumes once every queued reaction is done
RESUME_PHASES = (GamePhase.NIGHT_START, GamePhase.DAY_SPEECH, GamePhase.DAY_BADGE_SIGNUP)


class WerewolfGame:
    """Main game controller: owns the GameState and drives the phase machine."""

    def __init__(self, config: Optional[GameConfig] = None, event_emitter: Optional[EventEmitter] = None,
                 run_name: Optional[str] = None, agent_factory: Optional[AgentFactory] = None,
                 roles=None, human_input: Optional[Callable[[str], str]] = None):
        """
        Args:
            config: Game configuration (defaults are used when None)
            event_emitter: Observer hub; one is created when None
            run_name: Run directory name when recording runs
            agent_factory: Builds the decision source for each seat, overriding agent_type
            roles: Fixed seating (list of Role), mostly for tests and replays
            human_input: Console reader for the human seat (the CLI passes `input`)
        """
        self.config = config or GameConfig()
        self.config.validate()

        self.run_recorder: Optional[RunRecorder] = None
        if event_emitter is None:
            if self.config.record_runs:
                self.run_recorder = RunRecorder(self.config.runs_dir)
                self.run_recorder.create_run(run_name)
                print(f"Recording game to: {self.run_recorder.get_run_path()}/")
            event_emitter = EventEmitter(self.run_recorder)
        else:
            self.run_recorder = event_emitter.run_recorder
        self.event_emitter = event_emitter

        # Generate seed if not provided
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)

        self.agent_factory = agent_factory
        self.fixed_roles = roles
        self.human_input = human_input
        # One reader for the whole session, shared by every restarted game
        self.console = ConsoleReader(human_input) if human_input is not None else None
        self.broker = DecisionBroker(self.config)
        self.games_started = 0
        self._task: Optional[asyncio.Task] = None

        self.new_game()

    def new_game(self) -> GameState:
        """Discard the current game and seat a fresh table with a new game id."""
        seed = self.config.random_seed + self.games_started
        self.games_started += 1

        self.game_state = GameState(
            player_count=self.config.player_count,
            random_seed=seed,
            roles=self.fixed_roles,
            human_seat=self.config.human_seat,
            event_emitter=self.event_emitter
        )
        if not self.config.badge_election_enabled:
            self.game_state.badge_election_open = False

        self.moderator = Moderator(self.game_state, self.config, event_emitter=self.event_emitter)
        self.agents: Dict[int, BaseAgent] = {}
        self._initialize_agents()
        # Rebinding makes every request of the previous game stale
        self.broker.bind(self.game_state, self.agents, self.moderator)

        handler_args = (self.game_state, self.moderator, self.broker, self.config, self.event_emitter)
        self.night_handler = NightPhaseHandler(*handler_args)
        self.day_handler = DayPhaseHandler(*handler_args)
        self.voting_handler = VotingHandler(*handler_args)
        self.reaction_handler = ReactionHandler(*handler_args)

        self._phase_handlers = {
            GamePhase.NIGHT_START: self._run_night_start,
            GamePhase.NIGHT_GUARD_ACTION: self.night_handler.run_guard,
            GamePhase.NIGHT_WOLF_ACTION: self.night_handler.run_wolves,
            GamePhase.NIGHT_WITCH_ACTION: self.night_handler.run_witch,
            GamePhase.NIGHT_SEER_ACTION: self.night_handler.run_seer,
            GamePhase.NIGHT_RESOLVE: self._run_night_resolve,
            GamePhase.DAY_START: self._run_day_start,
            GamePhase.DAY_BADGE_SIGNUP: self.day_handler.run_badge_signup,
            GamePhase.DAY_BADGE_SPEECH: self.day_handler.run_badge_speeches,
            GamePhase.DAY_BADGE_ELECTION: self.voting_handler.run_badge_election,
            GamePhase.DAY_PK_SPEECH: self.day_handler.run_pk_speeches,
            GamePhase.DAY_SPEECH: self.day_handler.run_day_speeches,
            GamePhase.DAY_LAST_WORDS: self.day_handler.run_last_words,
            GamePhase.DAY_VOTE: self.voting_handler.run_day_vote,
            GamePhase.DAY_RESOLVE: self._run_day_resolve,
            GamePhase.BADGE_TRANSFER: self.reaction_handler.run_badge_transfer,
            GamePhase.HUNTER_SHOOT: self.reaction_handler.run_hunter_shot,
        }
        self._started = False
        self._finished = False
        return self.game_state

    def _initialize_agents(self) -> None:
        """Initialize agents for all seats based on config."""
        for player in self.game_state.players:
            if self.agent_factory is not None:
                agent = self.agent_factory(player, self.config)
            elif player.is_human:
                agent = HumanAgent(player, self.config, console=self.console)
            else:
                agent_type = self.config.agent_type
                if self.config.agent_types:
                    agent_type = self.config.agent_types.get(player.seat, agent_type)
                agent = self._create_agent(player, agent_type.lower())
            self.agents[player.seat] = agent

    def _create_agent(self, player: Player, agent_type: str) -> BaseAgent:
        """Create an agent of the specified type for a player."""
        if agent_type == "dummy_agent":
            return DummyAgent(player, self.config)
        elif agent_type == "simple_llm_agent":
            return SimpleLLMAgent(player, self.config)
        else:
            raise ValueError(
                f"Unknown agent_type: {agent_type}. "
                f"Must be 'simple_llm_agent' or 'dummy_agent'"
            )

    # Phase machine

    def _start(self) -> None:
        state = self.game_state
        self._started = True
        if self.event_emitter:
            self.event_emitter.emit_game_start(
                state.game_id,
                [p.seat for p in state.players],
                state.human_seat,
                state.players[state.human_seat].role.value if state.human_seat is not None else None
            )
            if self.run_recorder:
                self.run_recorder.save_metadata({
                    "game_id": state.game_id,
                    "roles": {p.seat: p.role.value for p in state.players},
                    "config": {
                        "player_count": self.config.player_count,
                        "agent_type": self.config.agent_type,
                        "llm_model": self.config.llm_model,
                        "difficulty": self.config.difficulty,
                        "random_seed": self.config.random_seed
                    }
                })
        state.start_night()
        self._announce_phase()

    def _enter(self, target: GamePhase) -> None:
        state = self.game_state
        if target in RESUME_PHASES and not state.has_pending_reaction:
            state.reaction_origin = None
        state.enter_phase(target)
        if target is GamePhase.NIGHT_START:
            state.start_night(new_round=True)
        self._announce_phase()

    def _announce_phase(self) -> None:
        state = self.game_state
        if self.config.use_announcements:
            print(f"\n--- {state.phase.value.upper()} (round {state.round}) ---")
        if self.event_emitter:
            self.event_emitter.emit_phase_change(state.phase.value, state.round)
        state.emit_state()

    async def _run_night_start(self) -> None:
        self.moderator.announce_night()

    async def _run_night_resolve(self) -> None:
        self.night_handler.resolve()

    async def _run_day_start(self) -> None:
        self.day_handler.announce_dawn()

    async def _run_day_resolve(self) -> None:
        self.voting_handler.resolve_day_vote()

    async def step(self) -> GamePhase:
        """
        Run the current phase to completion, then move to the next one.

        Returns:
            The phase the game is in afterwards

        Raises:
            IllegalPhaseTransition: If the game reached a state the rules cannot produce
        """
        state = self.game_state
        if not self._started:
            self._start()
        if state.is_over:
            return state.phase

        current = state.phase
        await self._phase_handlers[current]()

        # A restart or a win inside the phase ends this step
        if state is not self.game_state or state.is_over:
            return state.phase

        target = next_phase(current, TransitionContext.from_state(state))
        check_transition(current, target)
        self._enter(target)
        return target

    async def run_game_async(self) -> Optional[Team]:
        """
        Run the current game until GAME_END.

        Returns:
            Winning team, or None for a failed game
        """
        state = self.game_state
        try:
            while not state.is_over and state is self.game_state:
                await self.step()
        except IllegalPhaseTransition as e:
            if state is self.game_state:
                self._fail(e)

        if state is self.game_state:
            self._finish()
        return state.winner

    def _fail(self, error: IllegalPhaseTransition) -> None:
        """Terminate a corrupted game; observers only see an opaque failure."""
        state = self.game_state
        state.fail_game(error.message)
        self.moderator.announce("The game could not continue and has been stopped.")
        if self.event_emitter:
            self.event_emitter.emit_failure(state.game_id)

    def _finish(self) -> None:
        state = self.game_state
        if self._finished:
            return
        self._finished = True
        self.moderator.announce_winner()
        if self.event_emitter:
            self.event_emitter.emit_phase_change(state.phase.value, state.round)
            self.event_emitter.emit_game_end(
                state.winner.value if state.winner else None,
                state.round,
                state.game_id
            )
        state.emit_state()

    def start(self) -> asyncio.Task:
        """Run the current game as a task on the running event loop."""
        self._task = asyncio.get_running_loop().create_task(self.run_game_async())
        return self._task

    async def restart(self) -> asyncio.Task:
        """
        Abandon the running game and start a new one.

        Answers still in flight for the old game are dropped by the broker.
        """
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait([self._task])
        self.new_game()
        return self.start()

    def run_game(self) -> str:
        """
        Run the complete game until win condition.
        Returns winning team name.
        """
        state = self.game_state
        print("=" * 60)
        print("WEREWOLF - Starting")
        print("=" * 60)
        print(f"Players: {[p.seat for p in state.players]}")
        if state.human_seat is not None:
            human = state.players[state.human_seat]
            print(f"You are seat {human.seat}: {human.role.value}")
        print("=" * 60)

        asyncio.run(self.run_game_async())

        if state.failed:
            print("\n" + "=" * 60)
            print("GAME FAILED")
            print("=" * 60)
            self._print_game_summary()
            return "Failed"

        winner_name = "Werewolves" if state.winner is Team.WOLF else "Villagers"
        print("\n" + "=" * 60)
        print(f"GAME OVER - {winner_name} WIN!")
        print("=" * 60)
        self._print_game_summary()
        return winner_name

    def _print_game_summary(self) -> None:
        """Print a formatted game summary."""
        state = self.game_state
        print("\nGAME SUMMARY")
        print("-" * 60)
        print(f"Winner: {state.winner.value if state.winner else 'None'}")
        print(f"Rounds: {state.round}")
        print(f"Random Seed: {self.config.random_seed}")
        print(f"Badge holder: {state.badge_holder}")

        print("\nSeats:")
        for player in state.players:
            death = next((d for d in state.deaths if d.seat == player.seat), None)
            if death:
                status = f"died round {death.round_number} ({death.cause.value})"
            else:
                status = "alive"
            print(f"  - Player {player.seat}: {player.role.value} - {status}")

    def get_game_summary(self) -> Dict:
        """Get final game summary as dictionary."""
        return {
            "winner": self.game_state.winner.value if self.game_state.winner else None,
            "rounds": self.game_state.round,
            "final_state": self.game_state.get_game_summary(),
            "action_log": self.game_state.action_log[-10:],  # Last 10 actions
        }


def main():
    """Entry point for running a game."""
    parser = argparse.ArgumentParser(
        description="Run a Werewolf game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                         # All dummy agents, default rules
  python main.py --human-seat 0                          # Play seat 0 yourself
  python main.py --config configs/simple_llm_agent.yaml  # LLM agents
  python main.py --players 12 --seed 42                  # Reproducible 12-player table
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: built-in defaults)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for role dealing and dummy agents")
    parser.add_argument("--players", "-p", type=int, default=None,
                        help="Number of seats (8-12)")
    parser.add_argument("--human-seat", type=int, default=None,
                        help="Seat played from this console")
    parser.add_argument("--model", "-m", type=str, default=None,
                        help="LLM model to use. Overrides config file setting.")
    parser.add_argument("--difficulty", "-d", type=str, default=None,
                        help="Difficulty passed to the AI players")
    parser.add_argument("--run-name", "-r", type=str, default=None,
                        help="Record the run under runs/<run-name>/")

    args = parser.parse_args()
    load_dotenv()

    config = load_config(args.config)
    if args.seed is not None:
        config.random_seed = args.seed
    if args.players is not None:
        config.player_count = args.players
    if args.human_seat is not None:
        config.human_seat = args.human_seat
    if args.model is not None:
        config.llm_model = args.model
    if args.difficulty is not None:
        config.difficulty = args.difficulty
    if args.run_name is not None:
        config.record_runs = True

    print("Werewolf")
    print("=" * 60)
    if args.config:
        print(f"Using config: {args.config}")
        print(f"Agent type: {config.agent_type}")
    print("=" * 60)

    game = WerewolfGame(config=config, run_name=args.run_name, human_input=input)
    game.run_game()

    if game.run_recorder:
        recorded = game.run_recorder.summarize()
        print(f"\nGame events saved to: {game.run_recorder.get_run_path()} ({recorded['events']} events)")


if __name__ == "__main__":
    main()
