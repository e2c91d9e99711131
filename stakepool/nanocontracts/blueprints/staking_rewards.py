from typing import NamedTuple, Optional

from stakepool.nanocontracts.blueprint import Blueprint
from stakepool.nanocontracts.context import Context
from stakepool.nanocontracts.exception import NCFail, NCUnderflow
from stakepool.nanocontracts.types import Address, Amount, Timestamp, TokenUid, public, view
from stakepool.utils.uint256 import checked_add, checked_mul, checked_sub, mul_div

# Constants
PRECISION: int = 10**18  # Fixed-point scale of reward_per_token


# Events
class RewardAdded(NamedTuple):
    amount: int


class Staked(NamedTuple):
    address: Address
    amount: int


class Withdrawn(NamedTuple):
    address: Address
    amount: int


class RewardPaid(NamedTuple):
    address: Address
    amount: int


class RewardsDurationUpdated(NamedTuple):
    duration: int


class Recovered(NamedTuple):
    token_uid: TokenUid
    amount: int


class UserInfo(NamedTuple):
    """Position of a single address at a given timestamp."""

    balance: int
    earned: int
    rewards: int
    reward_per_token_paid: int


class StakingInfo(NamedTuple):
    """Pool statistics for the frontend."""

    staking_token: str  # hex-encoded token UID
    reward_token: str  # hex-encoded token UID
    total_staked: int
    reward_rate: int
    rewards_duration: int
    period_finish: int
    last_update_time: int
    reward_per_token: int
    reward_for_duration: int
    period_active: bool


class StakingRewards(Blueprint):
    """Pooled staking with rewards streamed at a fixed rate over a period.

    Rewards are accounted lazily: `reward_per_token_stored` accumulates the
    reward earned by one unit of stake since the contract was created, and
    each address keeps the value it has already been paid up to. An address
    is only reconciled when it interacts with the contract.

    The life cycle of contracts using this blueprint is the following:

    1. [Authority] Create a contract with the staking and reward tokens.
    2. [Authority] Fund the contract with reward tokens and `start_new_period(...)`.
    3. [User] `stake(...)`, `withdraw(...)`, `claim()` or `exit()`.
    4. [Authority] Once a period is over, `set_period_duration(...)` and start another one.
    """

    # Pool
    staking_token: TokenUid
    reward_token: TokenUid
    total_staked: Amount

    # Reward schedule
    reward_rate: int  # Reward units emitted per second
    rewards_duration: int  # Length of the next period, in seconds
    period_finish: Timestamp
    last_update_time: Timestamp
    reward_per_token_stored: int  # Scaled by PRECISION

    # User
    balances: dict[Address, Amount]
    user_reward_per_token_paid: dict[Address, int]  # Scaled by PRECISION
    rewards: dict[Address, Amount]  # Earned and not yet claimed

    def _validate_amount(self, amount: int) -> None:
        if amount < 0:
            raise NCUnderflow("Amount must not be negative")
        if amount == 0:
            raise AmountZero("Amount must be greater than zero")

    def _validate_duration(self, duration: int) -> None:
        if duration <= 0:
            raise InvalidDuration("Rewards duration must be positive")

    def _last_time_reward_applicable(self, now: int) -> int:
        return min(now, self.period_finish)

    def _reward_per_token(self, now: int) -> int:
        if self.total_staked == 0:
            return self.reward_per_token_stored
        elapsed = checked_sub(self._last_time_reward_applicable(now), self.last_update_time)
        return checked_add(
            self.reward_per_token_stored,
            mul_div(checked_mul(self.reward_rate, elapsed), PRECISION, self.total_staked),
        )

    def _earned(self, address: Address, now: int) -> Amount:
        pending_per_token = checked_sub(
            self._reward_per_token(now), self.user_reward_per_token_paid.get(address, 0)
        )
        return Amount(
            checked_add(
                mul_div(self.balances.get(address, 0), pending_per_token, PRECISION),
                self.rewards.get(address, 0),
            )
        )

    def _update_reward(self, address: Optional[Address], now: int) -> None:
        """Checkpoint the pool to `now` and, when given, reconcile `address` against it.

        The global accumulator must be frozen before the address is
        reconciled, so that both use the same reward_per_token.
        """
        self.reward_per_token_stored = self._reward_per_token(now)
        self.last_update_time = Timestamp(self._last_time_reward_applicable(now))
        if address is None:
            return
        self.rewards[address] = self._earned(address, now)
        self.user_reward_per_token_paid[address] = self.reward_per_token_stored

    def _withdraw(self, address: Address, amount: int) -> None:
        self.total_staked = Amount(checked_sub(self.total_staked, amount, InsufficientBalance))
        self.balances[address] = Amount(
            checked_sub(self.balances.get(address, 0), amount, InsufficientBalance)
        )
        self.syscall.transfer_out(self.staking_token, address, amount)
        self.syscall.emit_event(Withdrawn(address=address, amount=amount))

    def _claim(self, address: Address) -> None:
        reward = self.rewards.get(address, 0)
        if reward == 0:
            raise NoRewards("No rewards to claim")
        # zeroed before the transfer, the receiver may call back into the contract
        self.rewards[address] = Amount(0)
        self.syscall.transfer_out(self.reward_token, address, reward)
        self.syscall.emit_event(RewardPaid(address=address, amount=reward))

    @public
    def initialize(
        self,
        ctx: Context,
        staking_token: TokenUid,
        reward_token: TokenUid,
        rewards_duration: int,
    ) -> None:
        if staking_token == reward_token:
            raise WrongAsset("Staking and reward tokens must be different")
        self._validate_duration(rewards_duration)
        self.staking_token = staking_token
        self.reward_token = reward_token
        self.total_staked = Amount(0)
        self.reward_rate = 0
        self.rewards_duration = rewards_duration
        self.period_finish = Timestamp(0)
        self.last_update_time = Timestamp(0)
        self.reward_per_token_stored = 0

    @public(pausable=True, nonreentrant=True)
    def stake(self, ctx: Context, amount: int) -> None:
        self._validate_amount(amount)
        address = ctx.address
        self._update_reward(address, ctx.timestamp)
        self.total_staked = Amount(checked_add(self.total_staked, amount))
        self.balances[address] = Amount(checked_add(self.balances.get(address, 0), amount))
        self.syscall.transfer_in(self.staking_token, address, amount)
        self.syscall.emit_event(Staked(address=address, amount=amount))

    @public(pausable=True, nonreentrant=True)
    def withdraw(self, ctx: Context, amount: int) -> None:
        self._validate_amount(amount)
        self._update_reward(ctx.address, ctx.timestamp)
        self._withdraw(ctx.address, amount)

    @public(pausable=True, nonreentrant=True)
    def claim(self, ctx: Context) -> None:
        self._update_reward(ctx.address, ctx.timestamp)
        self._claim(ctx.address)

    @public(pausable=True, nonreentrant=True)
    def exit(self, ctx: Context) -> None:
        """Withdraw the whole balance and claim the rewards in a single call."""
        address = ctx.address
        self._update_reward(address, ctx.timestamp)
        balance = self.balances.get(address, 0)
        self._validate_amount(balance)
        self._withdraw(address, balance)
        self._claim(address)

    @public(authority=True)
    def start_new_period(self, ctx: Context, reward_amount: int) -> None:
        """Start a period of `rewards_duration` seconds emitting `reward_amount`.

        When the current period is still running, its undistributed rewards
        are added to the new period.
        """
        if reward_amount < 0:
            raise NCUnderflow("Amount must not be negative")
        now = ctx.timestamp
        self._update_reward(None, now)

        if now > self.period_finish:
            self.reward_rate = reward_amount // self.rewards_duration
        else:
            leftover = checked_mul(self.reward_rate, self.period_finish - now)
            self.reward_rate = checked_add(reward_amount, leftover) // self.rewards_duration

        # the contract must be able to pay the whole period out of its current reward balance
        balance = self.syscall.get_current_balance(self.reward_token)
        if self.reward_rate > balance // self.rewards_duration:
            raise RewardTooHigh("Provided reward too high")

        self.last_update_time = Timestamp(now)
        self.period_finish = Timestamp(checked_add(now, self.rewards_duration))
        self.log.info(
            "reward period started",
            reward_rate=self.reward_rate,
            period_finish=self.period_finish,
        )
        self.syscall.emit_event(RewardAdded(amount=reward_amount))

    @public(authority=True)
    def set_period_duration(self, ctx: Context, duration: int) -> None:
        if ctx.timestamp <= self.period_finish:
            raise PeriodNotOver("Previous rewards period must be complete")
        self._validate_duration(duration)
        self.rewards_duration = duration
        self.syscall.emit_event(RewardsDurationUpdated(duration=duration))

    @public(authority=True)
    def recover_foreign_asset(self, ctx: Context, token_uid: TokenUid, amount: int) -> None:
        """Send tokens that are not the staking token from the contract to the authority."""
        if token_uid == self.staking_token:
            raise WrongAsset("Cannot withdraw the staking token")
        self._validate_amount(amount)
        self.syscall.transfer_out(token_uid, ctx.address, amount)
        self.syscall.emit_event(Recovered(token_uid=token_uid, amount=amount))

    @view
    def get_staking_token(self) -> TokenUid:
        return self.staking_token

    @view
    def get_reward_token(self) -> TokenUid:
        return self.reward_token

    @view
    def get_period_finish(self) -> Timestamp:
        return self.period_finish

    @view
    def get_total_staked(self) -> Amount:
        return self.total_staked

    @view
    def get_balance(self, address: Address) -> Amount:
        return Amount(self.balances.get(address, 0))

    @view
    def last_time_reward_applicable(self, timestamp: Timestamp) -> Timestamp:
        return Timestamp(self._last_time_reward_applicable(timestamp))

    @view
    def reward_per_token(self, timestamp: Timestamp) -> int:
        return self._reward_per_token(timestamp)

    @view
    def earned(self, address: Address, timestamp: Timestamp) -> Amount:
        return self._earned(address, timestamp)

    @view
    def get_reward_for_duration(self) -> Amount:
        return Amount(checked_mul(self.reward_rate, self.rewards_duration))

    @view
    def get_user_info(self, address: Address, timestamp: Timestamp) -> UserInfo:
        return UserInfo(
            balance=self.balances.get(address, 0),
            earned=self._earned(address, timestamp),
            rewards=self.rewards.get(address, 0),
            reward_per_token_paid=self.user_reward_per_token_paid.get(address, 0),
        )

    @view
    def front_end_api(self, timestamp: Timestamp) -> StakingInfo:
        return StakingInfo(
            staking_token=self.staking_token.hex(),
            reward_token=self.reward_token.hex(),
            total_staked=self.total_staked,
            reward_rate=self.reward_rate,
            rewards_duration=self.rewards_duration,
            period_finish=self.period_finish,
            last_update_time=self.last_update_time,
            reward_per_token=self._reward_per_token(timestamp),
            reward_for_duration=checked_mul(self.reward_rate, self.rewards_duration),
            period_active=timestamp <= self.period_finish,
        )


class AmountZero(NCFail):
    pass


class InsufficientBalance(NCUnderflow):
    pass


class NoRewards(NCFail):
    pass


class PeriodNotOver(NCFail):
    pass


class RewardTooHigh(NCFail):
    pass


class WrongAsset(NCFail):
    pass


class InvalidDuration(NCFail):
    pass
